"""Configured front end for handling trace context on each request."""

from __future__ import annotations

from typing import Optional, Tuple

from tracecontext.config import TraceContextConfig, configure_logging, load_config
from tracecontext.context.headers import HeaderInput, Headers
from tracecontext.context.propagators import generate_trace_context, handle_trace_context
from tracecontext.context.trace_context import TraceContext
from tracecontext.utils.random_source import DEFAULT_RANDOM_SOURCE, SecureRandomSource


class TraceContextHandler:
    """
    Applies one configured vendor member and sampling behavior to requests.

    Holds configuration only; every call works on its own header copy.
    """

    def __init__(
        self,
        config: Optional[TraceContextConfig] = None,
        random_source: Optional[SecureRandomSource] = None,
    ) -> None:
        self.config = config or TraceContextConfig()
        self.random_source = random_source or DEFAULT_RANDOM_SOURCE

    @classmethod
    def from_config_file(cls, config_file: Optional[str] = None, **overrides) -> "TraceContextHandler":
        """Load configuration (file, env, overrides) and set up package logging."""
        config = load_config(config_file=config_file, overrides=overrides or None)
        configure_logging(config)
        return cls(config)

    def handle(self, headers: HeaderInput, parent_id: str = "") -> Tuple[Headers, TraceContext]:
        propagation = self.config.propagation
        return handle_trace_context(
            headers,
            parent_id=parent_id,
            member=propagation.member(),
            sampling=propagation.sampling,
            random_source=self.random_source,
        )

    def generate(self, parent_id: str = "") -> TraceContext:
        propagation = self.config.propagation
        return generate_trace_context(
            parent_id=parent_id,
            member=propagation.member(),
            sampling=propagation.sampling,
            random_source=self.random_source,
        )
