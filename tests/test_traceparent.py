"""Tests for traceparent parsing, mutation and serialization."""

import pytest

from tracecontext.context import TraceParent
from tracecontext.errors import (
    AllZeroIdError,
    InvalidIdError,
    InvalidIdFormatError,
    MalformedFutureVersionError,
    MalformedTraceParentError,
    ReservedVersionError,
)

TRACE_ID = "0af7651916cd43dd8448eb211c80319c"
PARENT_ID = "00f067aa0ba902b7"
SAMPLED = f"00-{TRACE_ID}-{PARENT_ID}-01"
NOT_SAMPLED = f"00-{TRACE_ID}-{PARENT_ID}-00"


class TestParse:
    def test_parse_version_00(self):
        tp = TraceParent.parse(SAMPLED)
        assert tp.version == 0
        assert tp.trace_id == TRACE_ID
        assert tp.parent_id == PARENT_ID
        assert tp.flags == 1

    def test_sampled_flag(self):
        assert TraceParent.parse(SAMPLED).is_sampled()
        assert not TraceParent.parse(NOT_SAMPLED).sampled

    def test_unknown_flag_bits_kept(self):
        tp = TraceParent.parse(f"00-{TRACE_ID}-{PARENT_ID}-09")
        assert tp.flags == 0x09
        assert tp.sampled
        assert tp.serialize().endswith("-09")

    def test_zero_trace_id(self):
        with pytest.raises(AllZeroIdError):
            TraceParent.parse("00-00000000000000000000000000000000-0000000000000001-00")

    def test_zero_parent_id(self):
        with pytest.raises(AllZeroIdError):
            TraceParent.parse("00-00000000000000000000000000000001-0000000000000000-00")

    def test_reserved_version(self):
        with pytest.raises(ReservedVersionError):
            TraceParent.parse(f"ff-{TRACE_ID}-{PARENT_ID}-01")

    def test_reserved_version_with_trailing_fields(self):
        with pytest.raises(ReservedVersionError):
            TraceParent.parse(f"ff-{TRACE_ID}-{PARENT_ID}-01-extra")

    def test_reserved_version_is_malformed(self):
        with pytest.raises(MalformedTraceParentError):
            TraceParent.parse(f"ff-{TRACE_ID}-{PARENT_ID}-00")

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "garbage",
            f"00-{TRACE_ID}-{PARENT_ID}-01-extra",
            f"00-{TRACE_ID.upper()}-{PARENT_ID}-01",
            f"00-{TRACE_ID}-{PARENT_ID}-1",
            f"00_{TRACE_ID}_{PARENT_ID}_01",
            f"0-{TRACE_ID}-{PARENT_ID}-01",
            f"{SAMPLED}\n",
            f" {SAMPLED}",
        ],
    )
    def test_malformed(self, value):
        with pytest.raises(MalformedTraceParentError):
            TraceParent.parse(value)

    def test_non_string(self):
        with pytest.raises(MalformedTraceParentError):
            TraceParent.parse(None)


class TestFutureVersion:
    def test_higher_version_is_downgraded(self):
        tp = TraceParent.parse(f"01-{TRACE_ID}-{PARENT_ID}-01-123")
        assert tp.version == 0
        assert tp.trace_id == TRACE_ID
        assert tp.parent_id == PARENT_ID
        assert tp.sampled
        assert tp.serialize() == SAMPLED

    def test_higher_version_without_trailing_fields(self):
        tp = TraceParent.parse(f"cc-{TRACE_ID}-{PARENT_ID}-00")
        assert tp.version == 0
        assert not tp.sampled

    def test_trace_id_too_long(self):
        with pytest.raises(MalformedFutureVersionError):
            TraceParent.parse(f"01-{TRACE_ID}1-{PARENT_ID}-01")

    def test_flags_too_long(self):
        with pytest.raises(MalformedFutureVersionError):
            TraceParent.parse(f"01-{TRACE_ID}-{PARENT_ID}-010")

    def test_too_short(self):
        with pytest.raises(MalformedFutureVersionError):
            TraceParent.parse("01-illegal")

    def test_non_hex_parent(self):
        with pytest.raises(MalformedFutureVersionError):
            TraceParent.parse(f"02-{TRACE_ID}-00f067aa0ba902bz-01-x")

    def test_all_zero_ids_still_rejected(self):
        with pytest.raises(AllZeroIdError):
            TraceParent.parse(f"01-{'0' * 32}-{PARENT_ID}-01-x")


class TestMutation:
    def test_set_sampled(self):
        tp = TraceParent.parse(NOT_SAMPLED)
        tp.set_sampled(True)
        assert tp.sampled
        assert str(tp) == SAMPLED
        tp.set_sampled(False)
        assert not tp.sampled
        assert str(tp) == NOT_SAMPLED

    def test_clear_sampled_keeps_other_bits(self):
        tp = TraceParent.parse(f"00-{TRACE_ID}-{PARENT_ID}-03")
        tp.set_sampled(False)
        assert tp.flags == 0x02

    def test_set_parent_id(self):
        tp = TraceParent.parse(SAMPLED)
        tp.set_parent_id("b7ad6b7169203331")
        assert tp.serialize() == f"00-{TRACE_ID}-b7ad6b7169203331-01"

    def test_set_invalid_parent_id(self):
        tp = TraceParent.parse(SAMPLED)
        with pytest.raises(InvalidIdFormatError):
            tp.set_parent_id("short")
        with pytest.raises(AllZeroIdError):
            tp.set_parent_id("0" * 16)
        assert tp.parent_id == PARENT_ID


class TestNew:
    def test_new_is_unsampled_version_00(self):
        tp = TraceParent.new(TRACE_ID, PARENT_ID)
        assert tp.version == 0
        assert tp.flags == 0
        assert str(tp) == NOT_SAMPLED

    def test_new_validates(self):
        with pytest.raises(InvalidIdError):
            TraceParent.new("xyz", PARENT_ID)
        with pytest.raises(InvalidIdError):
            TraceParent.new(TRACE_ID, "0" * 16)

    def test_round_trip(self):
        tp = TraceParent.new(TRACE_ID, PARENT_ID)
        tp.set_sampled(True)
        assert TraceParent.parse(tp.serialize()) == tp
