"""Shared fixtures for the trace context tests."""

import itertools

import pytest

from tracecontext.errors import RandomSourceError


class CountingRandomSource:
    """Deterministic source: every draw is filled with the next counter byte."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def random_bytes(self, n: int) -> bytes:
        return bytes([next(self._counter) % 256 or 1]) * n


class FailingRandomSource:
    def random_bytes(self, n: int) -> bytes:
        raise RandomSourceError("random source unavailable")


class ShortRandomSource:
    def random_bytes(self, n: int) -> bytes:
        return b"\x01" * (n - 1)


class ZeroRandomSource:
    def random_bytes(self, n: int) -> bytes:
        return b"\x00" * n


@pytest.fixture
def counting_source():
    return CountingRandomSource()


@pytest.fixture
def failing_source():
    return FailingRandomSource()


@pytest.fixture
def short_source():
    return ShortRandomSource()


@pytest.fixture
def zero_source():
    return ZeroRandomSource()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TRACECONTEXT_* variables for the duration of a test."""
    import os

    for key in list(os.environ):
        if key.startswith("TRACECONTEXT_"):
            monkeypatch.delenv(key)
    return monkeypatch
