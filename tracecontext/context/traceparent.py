"""The traceparent header: version, trace id, parent id and flags."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tracecontext.errors import (
    MalformedFutureVersionError,
    MalformedTraceParentError,
    ReservedVersionError,
)
from tracecontext.utils.helpers import (
    PARENT_ID_FORMAT,
    TRACE_ID_FORMAT,
    validate_parent_id,
    validate_trace_id,
)

logger = logging.getLogger(__name__)

TRACEPARENT_HEADER = "traceparent"

HIGHEST_KNOWN_VERSION = 0x00
RESERVED_VERSION = 0xFF
FLAG_SAMPLED = 0x01

# Length of the fields every version shares: "vv-<32>-<16>-ff"
_PREFIX_LENGTH = 55

_VERSION_RE = re.compile(r"[0-9a-f]{2}")
_HEX_RE = re.compile(r"[0-9a-f]+")
_TRACEPARENT_RE = re.compile(
    rf"(?P<version>[0-9a-f]{{2}})-(?P<trace_id>{TRACE_ID_FORMAT})-"
    rf"(?P<parent_id>{PARENT_ID_FORMAT})-(?P<flags>[0-9a-f]{{2}})"
)


def _is_hex(value: str) -> bool:
    return bool(_HEX_RE.fullmatch(value))


@dataclass
class TraceParent:
    """
    Parsed traceparent header.

    ``version`` is never above ``HIGHEST_KNOWN_VERSION``: values of newer
    versions are downgraded while parsing.
    """

    trace_id: str
    parent_id: str
    flags: int = 0
    version: int = HIGHEST_KNOWN_VERSION

    @classmethod
    def new(cls, trace_id: str, parent_id: str) -> "TraceParent":
        """Create an unsampled version 00 traceparent from validated ids."""
        return cls(
            trace_id=validate_trace_id(trace_id),
            parent_id=validate_parent_id(parent_id),
        )

    @classmethod
    def parse(cls, value: str) -> "TraceParent":
        """
        Parse a traceparent header value.

        Values matching the version 00 layout are parsed directly. A value
        whose version is higher than any known one is parsed from the common
        prefix only; trailing fields are dropped and the version downgraded.

        Raises:
            ReservedVersionError: version ``ff``
            MalformedFutureVersionError: newer version without a usable prefix
            MalformedTraceParentError: anything else that does not parse
            AllZeroIdError: all zero trace id or parent id
        """
        if not isinstance(value, str):
            raise MalformedTraceParentError("traceparent must be a string", details={"value": value})

        match = _TRACEPARENT_RE.fullmatch(value)
        if match:
            version = int(match.group("version"), 16)
            cls._check_version(version, value)
            return cls._build(
                version,
                match.group("trace_id"),
                match.group("parent_id"),
                match.group("flags"),
                value,
            )

        version_field = value[:2]
        if _VERSION_RE.fullmatch(version_field):
            version = int(version_field, 16)
            cls._check_version(version, value)
            if version > HIGHEST_KNOWN_VERSION:
                return cls._parse_future(version, value)

        raise MalformedTraceParentError(
            "traceparent doesn't match the version 00 layout",
            details={"value": value},
        )

    @staticmethod
    def _check_version(version: int, value: str) -> None:
        if version == RESERVED_VERSION:
            raise ReservedVersionError("traceparent version ff is reserved", details={"value": value})

    @classmethod
    def _parse_future(cls, version: int, value: str) -> "TraceParent":
        if len(value) < _PREFIX_LENGTH:
            raise MalformedFutureVersionError(
                "traceparent of a future version is too short",
                details={"value": value},
            )
        if not (
            value[2] == "-"
            and _is_hex(value[3:35])
            and value[35] == "-"
            and _is_hex(value[36:52])
            and value[52] == "-"
            and _is_hex(value[53:55])
        ):
            raise MalformedFutureVersionError(
                "traceparent of a future version doesn't match the version 00 prefix",
                details={"value": value},
            )
        if len(value) > _PREFIX_LENGTH and value[_PREFIX_LENGTH] != "-":
            raise MalformedFutureVersionError(
                "traceparent of a future version has malformed trailing fields",
                details={"value": value},
            )
        return cls._build(version, value[3:35], value[36:52], value[53:55], value)

    @classmethod
    def _build(cls, version: int, trace_id: str, parent_id: str, flags: str, value: str) -> "TraceParent":
        validate_trace_id(trace_id)
        validate_parent_id(parent_id)
        if version > HIGHEST_KNOWN_VERSION:
            logger.debug(f"Downgrading traceparent version {version:02x} to {HIGHEST_KNOWN_VERSION:02x}: {value}")
        return cls(
            trace_id=trace_id,
            parent_id=parent_id,
            flags=int(flags, 16),
            version=HIGHEST_KNOWN_VERSION,
        )

    @property
    def sampled(self) -> bool:
        return bool(self.flags & FLAG_SAMPLED)

    def is_sampled(self) -> bool:
        return self.sampled

    def set_sampled(self, sampled: bool) -> None:
        if sampled:
            self.flags |= FLAG_SAMPLED
        else:
            self.flags &= ~FLAG_SAMPLED & 0xFF

    def set_parent_id(self, parent_id: str) -> None:
        self.parent_id = validate_parent_id(parent_id)

    def serialize(self) -> str:
        return f"{self.version:02x}-{self.trace_id}-{self.parent_id}-{self.flags:02x}"

    def __str__(self) -> str:
        return self.serialize()
