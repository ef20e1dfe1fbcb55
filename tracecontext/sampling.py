"""Sampling decisions applied to the traceparent sampled flag."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tracecontext.context.traceparent import TraceParent


class SamplingBehavior(str, Enum):
    """How the sampled flag of an outbound traceparent is decided."""

    PASS_THROUGH = "pass_through"
    ALWAYS_SAMPLED = "always_sampled"
    NEVER_SAMPLED = "never_sampled"

    def apply(self, traceparent: "TraceParent") -> None:
        if self is SamplingBehavior.ALWAYS_SAMPLED:
            traceparent.set_sampled(True)
        elif self is SamplingBehavior.NEVER_SAMPLED:
            traceparent.set_sampled(False)
