"""W3C trace context headers and their propagation."""

from tracecontext.context.headers import Headers
from tracecontext.context.traceparent import (
    FLAG_SAMPLED,
    HIGHEST_KNOWN_VERSION,
    TRACEPARENT_HEADER,
    TraceParent,
)
from tracecontext.context.tracestate import (
    MAX_MEMBERS,
    TRACESTATE_HEADER,
    TraceState,
    TraceStateMember,
    is_valid_key,
    is_valid_value,
)
from tracecontext.context.trace_context import TraceContext
from tracecontext.context.propagators import (
    InboundState,
    classify_inbound,
    generate_trace_context,
    handle_trace_context,
    new_trace_context,
    parse_trace_context,
)
from tracecontext.context.otel_propagator import (
    W3CTraceContextPropagator,
    from_otel_span_context,
    to_otel_span_context,
)

__all__ = [
    "Headers",
    "TraceParent",
    "TraceState",
    "TraceStateMember",
    "TraceContext",
    "TRACEPARENT_HEADER",
    "TRACESTATE_HEADER",
    "FLAG_SAMPLED",
    "HIGHEST_KNOWN_VERSION",
    "MAX_MEMBERS",
    "is_valid_key",
    "is_valid_value",
    "InboundState",
    "classify_inbound",
    "parse_trace_context",
    "new_trace_context",
    "generate_trace_context",
    "handle_trace_context",
    "W3CTraceContextPropagator",
    "to_otel_span_context",
    "from_otel_span_context",
]
