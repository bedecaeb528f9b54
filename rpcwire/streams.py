"""Helpers for message streams and call options."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from .errors import OtherError
from .metadata import Metadata

T = TypeVar("T")

_MISSING = object()


def stream_single(iterable: Iterable[T]) -> T:
    """Return the only element of ``iterable``.

    Raises OtherError if it is empty or has more than one element.
    """
    iterator = iter(iterable)
    first = next(iterator, _MISSING)
    if first is _MISSING:
        raise OtherError("expecting one element, found none")
    if next(iterator, _MISSING) is not _MISSING:
        raise OtherError("more than one element")
    return first


@dataclass
class RequestOptions:
    """Per-call options: initial metadata and a cacheability hint."""

    metadata: Metadata = field(default_factory=Metadata)
    cachable: bool = False