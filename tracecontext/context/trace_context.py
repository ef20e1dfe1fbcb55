"""Combined traceparent and tracestate of one request."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from tracecontext.context.headers import Headers
from tracecontext.context.traceparent import TRACEPARENT_HEADER, TraceParent
from tracecontext.context.tracestate import (
    TRACESTATE_HEADER,
    TraceState,
    TraceStateMember,
    is_valid_key,
    is_valid_value,
)
from tracecontext.errors import InvalidKeyError, InvalidValueError, NoTraceParentError
from tracecontext.sampling import SamplingBehavior
from tracecontext.utils.helpers import random_parent_id, validate_parent_id
from tracecontext.utils.random_source import SecureRandomSource


def resolve_member(member: TraceStateMember, parent_id: str) -> TraceStateMember:
    """
    Fill an empty member value with ``parent_id`` and validate the result.

    Raises:
        InvalidKeyError, InvalidValueError
    """
    if not member.value:
        member = replace(member, value=parent_id)
    if not is_valid_key(member.key):
        raise InvalidKeyError("key doesn't match allowed key pattern", details={"key": member.key})
    if not is_valid_value(member.value):
        raise InvalidValueError("value doesn't match allowed value pattern", details={"value": member.value})
    return member


@dataclass
class TraceContext:
    trace_parent: Optional[TraceParent] = None
    trace_state: Optional[TraceState] = None

    @property
    def trace_id(self) -> Optional[str]:
        return self.trace_parent.trace_id if self.trace_parent else None

    @property
    def parent_id(self) -> Optional[str]:
        return self.trace_parent.parent_id if self.trace_parent else None

    @property
    def sampled(self) -> bool:
        return bool(self.trace_parent and self.trace_parent.sampled)

    def mutate(
        self,
        parent_id: str = "",
        sampling: SamplingBehavior = SamplingBehavior.PASS_THROUGH,
        member: Optional[TraceStateMember] = None,
        random_source: Optional[SecureRandomSource] = None,
    ) -> None:
        """
        Re-parent this context for the outbound request.

        - ``parent_id`` replaces the parent id; an empty value draws a random one
        - ``sampling`` decides the sampled flag
        - ``member`` is moved to the front of the tracestate; an empty value
          defaults to the parent id

        Everything is validated before the context is touched.

        Raises:
            NoTraceParentError: the context has no traceparent
            InvalidIdError: ``parent_id`` is malformed
            InvalidKeyError, InvalidValueError: ``member`` is malformed
            RandomSourceError: a parent id could not be drawn
        """
        if self.trace_parent is None:
            raise NoTraceParentError("TraceContext without TraceParent cannot be mutated")

        if parent_id:
            validate_parent_id(parent_id)
        else:
            parent_id = random_parent_id(random_source)
        if member is not None:
            member = resolve_member(member, parent_id)

        self.trace_parent.set_parent_id(parent_id)
        sampling.apply(self.trace_parent)
        if member is not None:
            if self.trace_state is None:
                self.trace_state = TraceState.new(member)
            else:
                self.trace_state.mutate(member)

    def write_headers(self, headers: Headers) -> None:
        """
        Write traceparent and tracestate to ``headers``, replacing old values.

        An empty tracestate is not sent; a stale inbound one is removed.
        """
        if self.trace_parent is not None:
            headers.set(TRACEPARENT_HEADER, self.trace_parent.serialize())

        if self.trace_state is not None and len(self.trace_state) > 0:
            headers.set(TRACESTATE_HEADER, self.trace_state.serialize())
        else:
            headers.delete(TRACESTATE_HEADER)
