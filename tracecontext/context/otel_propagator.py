"""OpenTelemetry bridge: a TextMapPropagator backed by this package's codec."""

from __future__ import annotations

import logging
import typing
from typing import Optional

from opentelemetry.context import Context
from opentelemetry.propagators.textmap import (
    CarrierT,
    Getter,
    Setter,
    TextMapPropagator,
    default_getter,
    default_setter,
)
from opentelemetry.trace import NonRecordingSpan, get_current_span, set_span_in_context
from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags
from opentelemetry.trace import TraceState as OTelTraceState

from tracecontext.context.headers import Headers
from tracecontext.context.propagators import parse_trace_context
from tracecontext.context.trace_context import TraceContext
from tracecontext.context.traceparent import TRACEPARENT_HEADER, TraceParent
from tracecontext.context.tracestate import MAX_MEMBERS, TRACESTATE_HEADER, TraceState, TraceStateMember
from tracecontext.errors import InvalidIdError, MalformedTraceParentError
from tracecontext.utils.helpers import format_span_id, format_trace_id, parse_span_id, parse_trace_id

logger = logging.getLogger(__name__)


def to_otel_span_context(trace_context: TraceContext, is_remote: bool = True) -> OTelSpanContext:
    """Convert a TraceContext to an OTel SpanContext."""
    trace_parent = trace_context.trace_parent
    if trace_parent is None:
        raise ValueError("TraceContext without TraceParent has no span context")

    trace_state = OTelTraceState()
    if trace_context.trace_state is not None and len(trace_context.trace_state) > 0:
        # OTel rejects lists over 32 entries; keep the first of duplicate keys
        entries = {}
        for m in trace_context.trace_state:
            entries.setdefault(m.key, m.value)
        trace_state = OTelTraceState(list(entries.items())[:MAX_MEMBERS])

    return OTelSpanContext(
        trace_id=parse_trace_id(trace_parent.trace_id),
        span_id=parse_span_id(trace_parent.parent_id),
        is_remote=is_remote,
        trace_flags=TraceFlags(trace_parent.flags),
        trace_state=trace_state,
    )


def from_otel_span_context(span_context: OTelSpanContext) -> TraceContext:
    """
    Convert an OTel SpanContext to a TraceContext.

    Raises:
        InvalidIdError: the span context carries an invalid id
    """
    trace_parent = TraceParent.new(
        format_trace_id(span_context.trace_id),
        format_span_id(span_context.span_id),
    )
    trace_parent.flags = int(span_context.trace_flags)

    members = []
    if span_context.trace_state:
        members = [TraceStateMember(key=k, value=v) for k, v in span_context.trace_state.items()]

    return TraceContext(trace_parent=trace_parent, trace_state=TraceState(members=members))


class W3CTraceContextPropagator(TextMapPropagator):
    """
    Propagates traceparent/tracestate for OpenTelemetry.

    If ``vendor_key`` is set, injected tracestate lists carry that key at the
    front with the current span id as value.
    """

    def __init__(self, vendor_key: Optional[str] = None) -> None:
        self.vendor_key = vendor_key

    def extract(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        getter: Getter[CarrierT] = default_getter,
    ) -> Context:
        if context is None:
            context = Context()

        headers = Headers()
        for name in (TRACEPARENT_HEADER, TRACESTATE_HEADER):
            values = getter.get(carrier, name)
            if values:
                headers.set(name, values[0])

        if headers.get(TRACEPARENT_HEADER) is None:
            return context

        try:
            trace_context = parse_trace_context(headers)
        except (MalformedTraceParentError, InvalidIdError) as exc:
            logger.debug(f"Ignoring inbound traceparent: {exc}")
            return context

        span_context = to_otel_span_context(trace_context, is_remote=True)
        return set_span_in_context(NonRecordingSpan(span_context), context)

    def inject(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        setter: Setter[CarrierT] = default_setter,
    ) -> None:
        span_context = get_current_span(context).get_span_context()
        if not span_context.is_valid:
            return

        trace_context = from_otel_span_context(span_context)
        if self.vendor_key:
            trace_context.trace_state.mutate(
                TraceStateMember(key=self.vendor_key, value=trace_context.parent_id)
            )

        setter.set(carrier, TRACEPARENT_HEADER, trace_context.trace_parent.serialize())
        if len(trace_context.trace_state) > 0:
            setter.set(carrier, TRACESTATE_HEADER, trace_context.trace_state.serialize())

    @property
    def fields(self) -> typing.Set[str]:
        return {TRACEPARENT_HEADER, TRACESTATE_HEADER}
