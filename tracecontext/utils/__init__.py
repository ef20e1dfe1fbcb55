"""Identifier and randomness utilities."""

from tracecontext.utils.helpers import (
    validate_trace_id,
    validate_parent_id,
    random_trace_id,
    random_parent_id,
    format_trace_id,
    format_span_id,
    parse_trace_id,
    parse_span_id,
)
from tracecontext.utils.random_source import (
    DEFAULT_RANDOM_SOURCE,
    SecureRandomSource,
    SystemRandomSource,
)

__all__ = [
    "validate_trace_id",
    "validate_parent_id",
    "random_trace_id",
    "random_parent_id",
    "format_trace_id",
    "format_span_id",
    "parse_trace_id",
    "parse_span_id",
    "DEFAULT_RANDOM_SOURCE",
    "SecureRandomSource",
    "SystemRandomSource",
]
