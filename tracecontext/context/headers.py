"""Ordered, multi-valued, case-insensitive header container."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

HeaderInput = Union["Headers", Mapping[str, str], Mapping[str, Sequence[str]], None]


class Headers:
    """
    Minimal HTTP header mapping.

    Header names compare case-insensitively and keep their first spelling.
    ``get`` returns the first value stored under a name.
    """

    def __init__(self, items: Optional[Sequence[Tuple[str, str]]] = None) -> None:
        self._names: Dict[str, str] = {}
        self._values: Dict[str, List[str]] = {}
        for name, value in items or ():
            self.add(name, value)

    @classmethod
    def from_mapping(cls, headers: HeaderInput) -> "Headers":
        """
        Build a Headers instance from another container.

        Accepts ``Headers``, ``{name: value}`` and ``{name: [values]}``.
        The input is always copied.
        """
        if headers is None:
            return cls()
        if isinstance(headers, Headers):
            return headers.clone()
        result = cls()
        for name, value in headers.items():
            if isinstance(value, str):
                result.add(name, value)
            else:
                for item in value:
                    result.add(name, item)
        return result

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self._values.get(name.lower())
        if not values:
            return default
        return values[0]

    def get_all(self, name: str) -> List[str]:
        return list(self._values.get(name.lower(), ()))

    def set(self, name: str, value: str) -> None:
        key = name.lower()
        self._names.setdefault(key, name)
        self._values[key] = [value]

    def add(self, name: str, value: str) -> None:
        key = name.lower()
        self._names.setdefault(key, name)
        self._values.setdefault(key, []).append(value)

    def delete(self, name: str) -> None:
        key = name.lower()
        self._names.pop(key, None)
        self._values.pop(key, None)

    def clone(self) -> "Headers":
        copy = Headers()
        copy._names = dict(self._names)
        copy._values = {key: list(values) for key, values in self._values.items()}
        return copy

    def items(self) -> Iterator[Tuple[str, str]]:
        for key, values in self._values.items():
            for value in values:
                yield self._names[key], value

    def to_dict(self) -> Dict[str, str]:
        """Flatten to ``{name: first value}``."""
        return {self._names[key]: values[0] for key, values in self._values.items() if values}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self._values.get(name.lower()))

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return (self._names[key] for key in self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Headers({list(self.items())!r})"
