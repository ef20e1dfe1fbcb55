"""W3C Trace Context (traceparent / tracestate) codec and propagation."""

from tracecontext.config import TraceContextConfig, load_config
from tracecontext.context import (
    Headers,
    TraceContext,
    TraceParent,
    TraceState,
    TraceStateMember,
    TRACEPARENT_HEADER,
    TRACESTATE_HEADER,
    W3CTraceContextPropagator,
    generate_trace_context,
    handle_trace_context,
    new_trace_context,
    parse_trace_context,
)
from tracecontext.errors import TraceContextError
from tracecontext.handler import TraceContextHandler
from tracecontext.sampling import SamplingBehavior

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Headers",
    "TraceContext",
    "TraceParent",
    "TraceState",
    "TraceStateMember",
    "TRACEPARENT_HEADER",
    "TRACESTATE_HEADER",
    "SamplingBehavior",
    "TraceContextError",
    "TraceContextConfig",
    "TraceContextHandler",
    "W3CTraceContextPropagator",
    "load_config",
    "parse_trace_context",
    "generate_trace_context",
    "handle_trace_context",
    "new_trace_context",
]
