"""Sources of unpredictable bytes used for id generation."""

from __future__ import annotations

import secrets
from typing import Optional, Protocol

from tracecontext.errors import RandomSourceError


class SecureRandomSource(Protocol):
    """Anything able to hand out ``n`` cryptographically random bytes."""

    def random_bytes(self, n: int) -> bytes:
        ...


class SystemRandomSource:
    """Random source backed by the operating system CSPRNG."""

    def random_bytes(self, n: int) -> bytes:
        try:
            return secrets.token_bytes(n)
        except (OSError, NotImplementedError) as exc:
            raise RandomSourceError(
                "System random source unavailable",
                details={"requested": n, "cause": exc},
            ) from exc


DEFAULT_RANDOM_SOURCE = SystemRandomSource()


def draw_bytes(n: int, source: Optional[SecureRandomSource] = None) -> bytes:
    """
    Draw exactly ``n`` bytes from ``source`` (or the system source).

    Short reads are reported as an exhausted source; no retry happens here.
    """
    source = source or DEFAULT_RANDOM_SOURCE
    data = source.random_bytes(n)
    if data is None or len(data) != n:
        raise RandomSourceError(
            "Random source exhausted",
            details={"requested": n, "received": 0 if data is None else len(data)},
        )
    return bytes(data)
