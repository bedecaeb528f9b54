"""HTTP header lists."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class Header:
    """One header: a text name and a byte value."""

    name: str
    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.name, (bytes, bytearray)):
            object.__setattr__(self, "name", bytes(self.name).decode("ascii"))
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        elif not isinstance(self.value, bytes):
            object.__setattr__(self, "value", bytes(self.value))


class Headers:
    """An ordered list of headers; names may repeat."""

    def __init__(self, headers: Iterable[Header] = ()) -> None:
        self._headers: list[Header] = list(headers)

    def __iter__(self) -> Iterator[Header]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._headers == other._headers

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def get(self, name: str) -> str | None:
        """Return the first value for ``name`` as text, or None."""
        for header in self._headers:
            if header.name == name:
                try:
                    return header.value.decode("utf-8")
                except UnicodeDecodeError:
                    return None
        return None

    def get_int(self, name: str) -> int | None:
        """Return the first value for ``name`` parsed as a 32-bit integer, or None."""
        value = self.get(name)
        if value is None or not _INT_RE.fullmatch(value):
            return None
        number = int(value)
        if not _I32_MIN <= number <= _I32_MAX:
            return None
        return number

    def add(self, header: Header) -> None:
        """Append one header."""
        self._headers.append(header)

    def extend(self, headers: Iterable[Header]) -> None:
        """Append every header of ``headers``."""
        self._headers.extend(headers)