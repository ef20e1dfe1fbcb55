"""Trace context error hierarchy and exceptions."""

from __future__ import annotations


class TraceContextError(Exception):
    """Base exception for all trace context errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(TraceContextError):
    """Raised when configuration is invalid or conflicting."""
    pass


class InvalidIdError(TraceContextError):
    """Raised when a trace id or parent id is rejected."""
    pass


class InvalidIdFormatError(InvalidIdError):
    """Raised when an id is not lowercase hex of the required length."""
    pass


class AllZeroIdError(InvalidIdError):
    """Raised when an id consists only of zeros."""
    pass


class MalformedTraceParentError(TraceContextError):
    """Raised when a traceparent header value cannot be parsed."""
    pass


class MalformedFutureVersionError(MalformedTraceParentError):
    """Raised when a traceparent of an unknown higher version breaks the common prefix layout."""
    pass


class ReservedVersionError(MalformedTraceParentError):
    """Raised for the reserved traceparent version ff."""
    pass


class MalformedTraceStateError(TraceContextError):
    """Raised when a tracestate header value cannot be parsed."""
    pass


class InvalidMemberError(TraceContextError):
    """Raised when a tracestate member is rejected on mutation."""
    pass


class InvalidKeyError(InvalidMemberError):
    """Raised when a tracestate key does not match the key grammar."""
    pass


class InvalidValueError(InvalidMemberError):
    """Raised when a tracestate value does not match the value grammar."""
    pass


class RandomSourceError(TraceContextError):
    """Raised when the random source is exhausted or unavailable."""
    pass


class NoTraceParentError(TraceContextError):
    """Raised when a trace context without traceparent is mutated."""
    pass
