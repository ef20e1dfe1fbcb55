"""The tracestate header: an ordered list of vendor key/value members."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from tracecontext.errors import InvalidKeyError, InvalidValueError, MalformedTraceStateError

logger = logging.getLogger(__name__)

TRACESTATE_HEADER = "tracestate"

MAX_MEMBERS = 32

KEY_FORMAT = r"[a-z0-9][a-z0-9_\-*/@]{0,255}"
# Printable ASCII without "," and "=", not ending in a space
VALUE_FORMAT = r"[\x20-\x2b\x2d-\x3c\x3e-\x7e]{0,255}[\x21-\x2b\x2d-\x3c\x3e-\x7e]"

_KEY_RE = re.compile(KEY_FORMAT)
_VALUE_RE = re.compile(VALUE_FORMAT)
_OWS = " \t\r\n\f\v"


def is_valid_key(key: str) -> bool:
    return isinstance(key, str) and bool(_KEY_RE.fullmatch(key))


def is_valid_value(value: str) -> bool:
    return isinstance(value, str) and bool(_VALUE_RE.fullmatch(value))


@dataclass(frozen=True)
class TraceStateMember:
    key: str
    value: str = ""

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


def _parse_member(candidate: str) -> TraceStateMember:
    key, sep, value = candidate.strip(_OWS).partition("=")
    key = key.strip(_OWS)
    value = value.strip(_OWS)
    if not sep or not is_valid_key(key) or not is_valid_value(value):
        raise MalformedTraceStateError(
            "tracestate member doesn't match the key=value pattern",
            details={"member": candidate},
        )
    return TraceStateMember(key=key, value=value)


@dataclass
class TraceState:
    """
    Ordered tracestate list, leftmost member first.

    A parsed list is taken as received, duplicate keys included. ``mutate``
    replaces the first member with its key.
    """

    members: List[TraceStateMember] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "TraceState":
        return cls()

    @classmethod
    def new(cls, member: TraceStateMember) -> "TraceState":
        """Create a tracestate holding a single validated member."""
        state = cls()
        state.mutate(member)
        return state

    @classmethod
    def parse(cls, value: str) -> "TraceState":
        """
        Parse a tracestate header value.

        Empty list members are skipped, so an empty or blank header yields an
        empty tracestate. One malformed member rejects the whole header.

        Raises:
            MalformedTraceStateError: a member does not match ``key=value``
        """
        if value is None:
            return cls()
        members = []
        for candidate in value.split(","):
            if not candidate.strip(_OWS):
                continue
            members.append(_parse_member(candidate))
        return cls(members=members)

    def mutate(self, member: TraceStateMember) -> None:
        """
        Move ``member`` to the front of the list.

        The first existing member with the same key is removed. The list is
        then cut down to ``MAX_MEMBERS`` by dropping rightmost members.

        Raises:
            InvalidKeyError: key rejected, list left untouched
            InvalidValueError: value rejected, list left untouched
        """
        if not is_valid_key(member.key):
            raise InvalidKeyError("key doesn't match allowed key pattern", details={"key": member.key})
        if not is_valid_value(member.value):
            raise InvalidValueError("value doesn't match allowed value pattern", details={"value": member.value})

        remaining = list(self.members)
        for index, existing in enumerate(remaining):
            if existing.key == member.key:
                del remaining[index]
                break
        remaining.insert(0, member)
        if len(remaining) > MAX_MEMBERS:
            logger.debug(f"Evicting {len(remaining) - MAX_MEMBERS} tracestate member(s) over the {MAX_MEMBERS} limit")
            del remaining[MAX_MEMBERS:]
        self.members = remaining

    def member_value(self, key: str) -> Optional[str]:
        for member in self.members:
            if member.key == key:
                return member.value
        return None

    def serialize(self) -> str:
        return ",".join(str(member) for member in self.members)

    def __str__(self) -> str:
        return self.serialize()

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[TraceStateMember]:
        return iter(self.members)
