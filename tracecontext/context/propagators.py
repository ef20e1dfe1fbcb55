"""W3C trace context propagation: parse, generate and hand on trace context headers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

from tracecontext.context.headers import HeaderInput, Headers
from tracecontext.context.trace_context import TraceContext, resolve_member
from tracecontext.context.traceparent import TRACEPARENT_HEADER, TraceParent
from tracecontext.context.tracestate import (
    TRACESTATE_HEADER,
    TraceState,
    TraceStateMember,
)
from tracecontext.errors import InvalidIdError, MalformedTraceParentError, MalformedTraceStateError
from tracecontext.sampling import SamplingBehavior
from tracecontext.utils.helpers import random_parent_id, random_trace_id, validate_parent_id
from tracecontext.utils.random_source import SecureRandomSource

logger = logging.getLogger(__name__)


class InboundState(Enum):
    """What the inbound traceparent header turned out to be."""

    ABSENT = "absent"
    VALID_PARENT = "valid_parent"
    INVALID_PARENT = "invalid_parent"


def parse_trace_context(headers: HeaderInput) -> TraceContext:
    """
    Parse traceparent and tracestate from ``headers``.

    A tracestate that fails to parse is replaced by an empty one and never
    affects the traceparent.

    Raises:
        MalformedTraceParentError: traceparent missing or malformed
        InvalidIdError: traceparent carries an all zero id
    """
    headers = Headers.from_mapping(headers)
    trace_parent = TraceParent.parse(headers.get(TRACEPARENT_HEADER, ""))

    raw_state = headers.get(TRACESTATE_HEADER, "")
    try:
        trace_state = TraceState.parse(raw_state)
    except MalformedTraceStateError as exc:
        logger.debug(f"Dropping unparseable tracestate: {exc}")
        trace_state = TraceState.empty()

    return TraceContext(trace_parent=trace_parent, trace_state=trace_state)


def new_trace_context(trace_id: str, parent_id: str) -> TraceContext:
    """
    Build an unsampled context from ids the caller already holds.

    Raises:
        InvalidIdError: either id is malformed
    """
    return TraceContext(
        trace_parent=TraceParent.new(trace_id, parent_id),
        trace_state=TraceState.empty(),
    )


def generate_trace_context(
    parent_id: str = "",
    member: Optional[TraceStateMember] = None,
    sampling: SamplingBehavior = SamplingBehavior.PASS_THROUGH,
    random_source: Optional[SecureRandomSource] = None,
) -> TraceContext:
    """
    Start a new trace.

    The trace id is always random; ``parent_id`` is drawn too when empty. The
    tracestate holds ``member`` alone (its value defaulting to the parent id)
    or nothing.

    Raises:
        RandomSourceError: ids could not be drawn
        InvalidIdError: ``parent_id`` is malformed
        InvalidKeyError, InvalidValueError: ``member`` is malformed
    """
    if parent_id:
        validate_parent_id(parent_id)
    trace_id = random_trace_id(random_source)
    if not parent_id:
        parent_id = random_parent_id(random_source)

    trace_parent = TraceParent.new(trace_id, parent_id)
    sampling.apply(trace_parent)

    if member is None:
        trace_state = TraceState.empty()
    else:
        trace_state = TraceState.new(resolve_member(member, parent_id))

    return TraceContext(trace_parent=trace_parent, trace_state=trace_state)


def classify_inbound(headers: Headers) -> Tuple[InboundState, Optional[TraceContext]]:
    """Sort inbound headers into absent / valid / invalid traceparent."""
    if not headers.get(TRACEPARENT_HEADER):
        return InboundState.ABSENT, None
    try:
        return InboundState.VALID_PARENT, parse_trace_context(headers)
    except (MalformedTraceParentError, InvalidIdError) as exc:
        logger.debug(f"Restarting trace after unparseable traceparent: {exc}")
        return InboundState.INVALID_PARENT, None


def handle_trace_context(
    headers: HeaderInput,
    parent_id: str = "",
    member: Optional[TraceStateMember] = None,
    sampling: SamplingBehavior = SamplingBehavior.PASS_THROUGH,
    random_source: Optional[SecureRandomSource] = None,
) -> Tuple[Headers, TraceContext]:
    """
    Compute the outbound trace context for a request.

    A copy of ``headers`` is returned with only traceparent and tracestate
    changed, together with the context they were written from:

    - no traceparent: any tracestate is discarded and a new trace generated
    - valid traceparent: the trace id is kept, the context re-parented with
      ``parent_id``, ``sampling`` and ``member``
    - invalid traceparent: the tracestate is discarded and a new trace
      generated

    Malformed inbound headers never raise.

    Raises:
        RandomSourceError: ids could not be drawn
        InvalidIdError: ``parent_id`` is malformed
        InvalidKeyError, InvalidValueError: ``member`` is malformed
    """
    new_headers = Headers.from_mapping(headers)
    state, trace_context = classify_inbound(new_headers)

    if state is InboundState.VALID_PARENT:
        trace_context.mutate(parent_id, sampling, member, random_source=random_source)
    else:
        new_headers.delete(TRACESTATE_HEADER)
        trace_context = generate_trace_context(parent_id, member, sampling, random_source=random_source)

    trace_context.write_headers(new_headers)
    return new_headers, trace_context
