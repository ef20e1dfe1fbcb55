"""Tests for trace id / parent id validation and generation."""

import re

import pytest

from tracecontext.errors import AllZeroIdError, InvalidIdError, InvalidIdFormatError, RandomSourceError
from tracecontext.utils import (
    format_span_id,
    format_trace_id,
    parse_span_id,
    parse_trace_id,
    random_parent_id,
    random_trace_id,
    validate_parent_id,
    validate_trace_id,
)

TRACE_ID = "0af7651916cd43dd8448eb211c80319c"
PARENT_ID = "00f067aa0ba902b7"


class TestValidation:
    def test_valid_ids_returned_unchanged(self):
        assert validate_trace_id(TRACE_ID) == TRACE_ID
        assert validate_parent_id(PARENT_ID) == PARENT_ID

    @pytest.mark.parametrize(
        "value",
        [
            "",
            TRACE_ID[:-1],
            TRACE_ID + "0",
            TRACE_ID.upper(),
            "g" + TRACE_ID[1:],
            TRACE_ID + "\n",
        ],
    )
    def test_malformed_trace_id(self, value):
        with pytest.raises(InvalidIdFormatError):
            validate_trace_id(value)

    @pytest.mark.parametrize("value", ["", PARENT_ID[:-1], PARENT_ID + "a", "00F067AA0BA902B7"])
    def test_malformed_parent_id(self, value):
        with pytest.raises(InvalidIdFormatError):
            validate_parent_id(value)

    def test_all_zero_rejected(self):
        with pytest.raises(AllZeroIdError):
            validate_trace_id("0" * 32)
        with pytest.raises(AllZeroIdError):
            validate_parent_id("0" * 16)

    def test_errors_share_base(self):
        with pytest.raises(InvalidIdError):
            validate_trace_id("nope")

    def test_error_message_carries_value(self):
        with pytest.raises(InvalidIdFormatError) as excinfo:
            validate_parent_id("xyz")
        assert "parent_id=xyz" in str(excinfo.value)


class TestGeneration:
    def test_random_ids_are_valid(self):
        assert validate_trace_id(random_trace_id())
        assert validate_parent_id(random_parent_id())

    def test_random_ids_differ(self):
        assert random_trace_id() != random_trace_id()

    def test_uses_given_source(self, counting_source):
        assert random_trace_id(counting_source) == "01" * 16
        assert random_parent_id(counting_source) == "02" * 8

    def test_failing_source_propagates(self, failing_source):
        with pytest.raises(RandomSourceError):
            random_trace_id(failing_source)

    def test_short_read_is_exhaustion(self, short_source):
        with pytest.raises(RandomSourceError) as excinfo:
            random_parent_id(short_source)
        assert excinfo.value.details == {"requested": 8, "received": 7}

    def test_all_zero_draw_rejected(self, zero_source):
        with pytest.raises(RandomSourceError):
            random_trace_id(zero_source)


class TestIntConversion:
    def test_round_trip(self):
        assert format_trace_id(parse_trace_id(TRACE_ID)) == TRACE_ID
        assert format_span_id(parse_span_id(PARENT_ID)) == PARENT_ID

    def test_zero_padding(self):
        assert re.fullmatch(r"0{31}1", format_trace_id(1))
        assert format_span_id(255) == "00000000000000ff"

    def test_empty_parses_to_zero(self):
        assert parse_trace_id("") == 0
        assert parse_span_id("") == 0
