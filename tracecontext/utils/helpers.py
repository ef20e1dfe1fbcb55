"""Trace id and parent id validation, generation and conversion."""

from __future__ import annotations

import re
from typing import Optional

from tracecontext.errors import AllZeroIdError, InvalidIdFormatError, RandomSourceError
from tracecontext.utils.random_source import SecureRandomSource, draw_bytes

TRACE_ID_BYTES = 16
PARENT_ID_BYTES = 8

TRACE_ID_FORMAT = r"[0-9a-f]{32}"
PARENT_ID_FORMAT = r"[0-9a-f]{16}"

_TRACE_ID_RE = re.compile(TRACE_ID_FORMAT)
_PARENT_ID_RE = re.compile(PARENT_ID_FORMAT)


def _validate(value: str, pattern: re.Pattern, kind: str) -> str:
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise InvalidIdFormatError(
            f"{kind} must match {pattern.pattern}",
            details={kind: value},
        )
    if not value.strip("0"):
        raise AllZeroIdError(f"all zero {kind} is not allowed", details={kind: value})
    return value


def validate_trace_id(value: str) -> str:
    """
    Validate a trace id.

    Args:
        value: 32 lowercase hex characters

    Returns:
        The unchanged trace id

    Raises:
        InvalidIdFormatError: wrong length or not lowercase hex
        AllZeroIdError: every character is ``0``
    """
    return _validate(value, _TRACE_ID_RE, "trace_id")


def validate_parent_id(value: str) -> str:
    """Validate a 16 character parent (span) id, see ``validate_trace_id``."""
    return _validate(value, _PARENT_ID_RE, "parent_id")


def _random_hex(n: int, source: Optional[SecureRandomSource]) -> str:
    data = draw_bytes(n, source)
    if not any(data):
        raise RandomSourceError("Random source produced an all zero id", details={"requested": n})
    return data.hex()


def random_trace_id(source: Optional[SecureRandomSource] = None) -> str:
    """Generate a new trace id from the random source."""
    return _random_hex(TRACE_ID_BYTES, source)


def random_parent_id(source: Optional[SecureRandomSource] = None) -> str:
    """Generate a new parent id from the random source."""
    return _random_hex(PARENT_ID_BYTES, source)


def format_trace_id(trace_id: int) -> str:
    """
    Format OTel trace_id (int) to hex string.

    Args:
        trace_id: OTel trace_id as int

    Returns:
        32-character hex string
    """
    return format(trace_id, '032x')


def format_span_id(span_id: int) -> str:
    """
    Format OTel span_id (int) to hex string.

    Args:
        span_id: OTel span_id as int

    Returns:
        16-character hex string
    """
    return format(span_id, '016x')


def parse_trace_id(hex_string: str) -> int:
    """
    Parse hex string trace_id to OTel int.

    Args:
        hex_string: 32-character hex string

    Returns:
        OTel trace_id as int
    """
    if not hex_string:
        return 0
    return int(hex_string, 16)


def parse_span_id(hex_string: str) -> int:
    """
    Parse hex string span_id to OTel int.

    Args:
        hex_string: 16-character hex string

    Returns:
        OTel span_id as int
    """
    if not hex_string:
        return 0
    return int(hex_string, 16)
