"""Custom call metadata carried in HTTP headers."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .errors import MetadataDecodeError
from .headers import Header, Headers


@dataclass(frozen=True)
class MetadataKey:
    """A metadata key; keys ending in ``-bin`` carry binary values."""

    name: str

    def __post_init__(self) -> None:
        if isinstance(self.name, (bytes, bytearray)):
            object.__setattr__(self, "name", bytes(self.name).decode("utf-8"))
        if not self.name:
            raise ValueError("metadata key must not be empty")

    def is_bin(self) -> bool:
        """Whether values under this key are binary."""
        return self.name.endswith("-bin")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MetadataEntry:
    """One key and its raw value."""

    key: MetadataKey
    value: bytes

    def to_header(self) -> Header:
        """Encode as a header, base64-encoding binary values."""
        value = base64.b64encode(self.value) if self.key.is_bin() else self.value
        return Header(self.key.name, value)

    @classmethod
    def from_header(cls, header: Header) -> MetadataEntry | None:
        """Decode a header; pseudo-headers and ``grpc-`` headers give None."""
        if header.name.startswith(":") or header.name.startswith("grpc-"):
            return None
        key = MetadataKey(header.name)
        value = header.value
        if key.is_bin():
            try:
                value = base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise MetadataDecodeError(str(exc)) from exc
        return cls(key, value)


@dataclass
class Metadata:
    """An ordered list of metadata entries."""

    entries: list[MetadataEntry] = field(default_factory=list)

    def __iter__(self) -> Iterator[MetadataEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_headers(cls, headers: Iterable[Header]) -> Metadata:
        """Collect the metadata entries of ``headers``."""
        entries = (MetadataEntry.from_header(h) for h in headers)
        return cls([e for e in entries if e is not None])

    def to_headers(self) -> Headers:
        """Encode every entry as a header."""
        return Headers(entry.to_header() for entry in self.entries)

    def get(self, name: str) -> bytes | None:
        """Return the first value stored under ``name``, or None."""
        return next((e.value for e in self.entries if e.key.name == name), None)

    def extend(self, other: Metadata) -> None:
        """Append the entries of ``other``."""
        self.entries.extend(other.entries)

    def add(self, key: MetadataKey | str, value: bytes | str) -> None:
        """Append one entry."""
        if not isinstance(key, MetadataKey):
            key = MetadataKey(key)
        if isinstance(value, str):
            value = value.encode("utf-8")
        self.entries.append(MetadataEntry(key, bytes(value)))