"""A route guide service: feature lookup, route recording and route chat."""

from __future__ import annotations

import json
import math
import threading
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike

ROUTE_GUIDE_DB_PATH = "testdata/route_guide_db.json"

_COORD_FACTOR = 1e7
_EARTH_RADIUS_M = 6371000.0
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class Point:
    """A position in E7 degrees."""

    latitude: int = 0
    longitude: int = 0


@dataclass(frozen=True)
class Rectangle:
    """A latitude-longitude rectangle given by two opposite corners."""

    lo: Point = field(default_factory=Point)
    hi: Point = field(default_factory=Point)


@dataclass(frozen=True)
class Feature:
    """A named feature at a location; an empty name means nothing is there."""

    name: str = ""
    location: Point = field(default_factory=Point)


@dataclass(frozen=True)
class RouteNote:
    """A message sent while at a location."""

    location: Point = field(default_factory=Point)
    message: str = ""


@dataclass(frozen=True)
class RouteSummary:
    """What a recorded route came to."""

    point_count: int = 0
    feature_count: int = 0
    distance: int = 0
    elapsed_time: int = 0


def in_range(point: Point, rect: Rectangle) -> bool:
    """Whether ``point`` lies within ``rect``, edges included."""
    left = min(rect.lo.longitude, rect.hi.longitude)
    right = max(rect.lo.longitude, rect.hi.longitude)
    top = max(rect.lo.latitude, rect.hi.latitude)
    bottom = min(rect.lo.latitude, rect.hi.latitude)
    return left <= point.longitude <= right and bottom <= point.latitude <= top


def calc_distance(p1: Point, p2: Point) -> int:
    """Great-circle distance between two points in whole metres."""
    lat1 = math.radians(p1.latitude / _COORD_FACTOR)
    lat2 = math.radians(p2.latitude / _COORD_FACTOR)
    lng1 = math.radians(p1.longitude / _COORD_FACTOR)
    lng2 = math.radians(p2.longitude / _COORD_FACTOR)
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return max(0, int(_EARTH_RADIUS_M * c))


def serialize_point(point: Point) -> str:
    """A text key identifying ``point``."""
    return f"{point.latitude} {point.longitude}"


def _require(mapping: dict, key: str) -> object:
    if key not in mapping:
        raise ValueError(f"missing field {key!r}")
    return mapping[key]


def _as_i32(value: object, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"field {key!r} is not an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field {key!r} is not a 32-bit integer")
    return value


def _feature_from_json(item: object) -> Feature:
    if not isinstance(item, dict):
        raise ValueError("feature is not an object")
    name = _require(item, "name")
    if not isinstance(name, str):
        raise ValueError("field 'name' is not a string")
    location = _require(item, "location")
    if not isinstance(location, dict):
        raise ValueError("field 'location' is not an object")
    point = Point(
        latitude=_as_i32(_require(location, "latitude"), "latitude"),
        longitude=_as_i32(_require(location, "longitude"), "longitude"),
    )
    return Feature(name=name, location=point)


def load_features(path: str | PathLike[str]) -> list[Feature]:
    """Read a JSON array of features from ``path``."""
    with open(path, encoding="utf-8") as file:
        document = json.load(file)
    if not isinstance(document, list):
        raise ValueError("feature database is not an array")
    return [_feature_from_json(item) for item in document]


class RouteGuideService:
    """Serves lookups over a fixed set of features and relays route notes."""

    def __init__(self, features: Iterable[Feature] = ()) -> None:
        self.saved_features: list[Feature] = list(features)
        self._route_notes: dict[str, list[RouteNote]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_db(cls, path: str | PathLike[str] = ROUTE_GUIDE_DB_PATH) -> RouteGuideService:
        """Create a service with the features stored at ``path``."""
        return cls(load_features(path))

    def get_feature(self, point: Point) -> Feature:
        """The feature at ``point``, or an unnamed feature there."""
        return next(
            (f for f in self.saved_features if f.location == point),
            Feature(location=point),
        )

    def list_features(self, rect: Rectangle) -> Iterator[Feature]:
        """Yield every feature within ``rect``."""
        return (f for f in list(self.saved_features) if in_range(f.location, rect))

    def record_route(self, points: Iterable[Point]) -> RouteSummary:
        """Count points and features passed, and total the distance travelled."""
        start = time.monotonic()
        point_count = feature_count = distance = 0
        last_point: Point | None = None
        for point in points:
            point_count += 1
            feature_count += sum(1 for f in self.saved_features if f.location == point)
            if last_point is not None:
                distance += calc_distance(last_point, point)
            last_point = point
        return RouteSummary(
            point_count=point_count,
            feature_count=feature_count,
            distance=distance,
            elapsed_time=int(time.monotonic() - start),
        )

    def route_chat(self, notes: Iterable[RouteNote]) -> Iterator[RouteNote]:
        """For each note, store it and yield every note stored at its location."""
        for note in notes:
            key = serialize_point(note.location)
            with self._lock:
                stored = self._route_notes.setdefault(key, [])
                stored.append(note)
                snapshot = list(stored)
            yield from snapshot