"""
Coordinate normalization.

Callers hand the detector whatever they already have: `[lat, lon]` pairs,
`(lat, lon)` tuples, dicts, or objects exposing latitude/longitude. Everything is
normalized to a `GeoPoint` before any math runs, while the detector keeps the
original objects around so results come back in the caller's own representation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Literal, Protocol, runtime_checkable

from geoanomaly.core.errors import InvalidCoordinateError
from geoanomaly.core.geo import GeoPoint

CoordinateBounds = Literal["loose", "strict"]

# Loose bounds check both elements against the longitude range.
_LAT_LIMIT: dict[str, float] = {"loose": 180.0, "strict": 90.0}
_LON_LIMIT = 180.0


@runtime_checkable
class CoordinateLike(Protocol):
    """Anything exposing `latitude` and `longitude` (attributes or zero-arg methods)."""

    latitude: Any
    longitude: Any


def _as_degrees(value: Any, name: str, *, index: int | None) -> float:
    if value is None:
        raise InvalidCoordinateError(f"{name} is missing", index=index)
    # bool is an int subclass, but True/False are never meant as degrees.
    if isinstance(value, bool):
        raise InvalidCoordinateError(f"{name} must be a number, got {value!r}", index=index)
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(f"{name} must be a number, got {value!r}", index=index) from None
    if not math.isfinite(out):
        raise InvalidCoordinateError(f"{name} must be finite, got {value!r}", index=index)
    return out


def from_pair(value: Sequence[Any], *, index: int | None = None) -> GeoPoint:
    """Build a point from a `(lat, lon)` sequence."""
    if len(value) != 2:
        raise InvalidCoordinateError(
            f"expected a (latitude, longitude) pair, got {len(value)} elements", index=index
        )
    return GeoPoint(
        lat=_as_degrees(value[0], "latitude", index=index),
        lon=_as_degrees(value[1], "longitude", index=index),
    )


def _read_accessor(obj: Any, name: str) -> Any:
    value = getattr(obj, name)
    return value() if callable(value) else value


def from_accessor(obj: CoordinateLike | Any, *, index: int | None = None) -> GeoPoint:
    """Build a point from an object with `latitude`/`longitude` or `lat`/`lon`."""
    if hasattr(obj, "latitude") and hasattr(obj, "longitude"):
        lat_name, lon_name = "latitude", "longitude"
    elif hasattr(obj, "lat") and hasattr(obj, "lon"):
        lat_name, lon_name = "lat", "lon"
    else:
        raise InvalidCoordinateError(
            f"{type(obj).__name__} exposes neither latitude/longitude nor lat/lon", index=index
        )
    return GeoPoint(
        lat=_as_degrees(_read_accessor(obj, lat_name), "latitude", index=index),
        lon=_as_degrees(_read_accessor(obj, lon_name), "longitude", index=index),
    )


_MAPPING_KEYS = (("latitude", "longitude"), ("lat", "lon"), ("lat", "lng"))


def _from_mapping(obj: Mapping[str, Any], *, index: int | None) -> GeoPoint:
    # Prefer a complete key pair; otherwise report the half-present one.
    keys = next((k for k in _MAPPING_KEYS if k[0] in obj and k[1] in obj), None)
    if keys is None:
        keys = next((k for k in _MAPPING_KEYS if k[0] in obj or k[1] in obj), None)
    if keys is not None:
        lat_key, lon_key = keys
        return GeoPoint(
            lat=_as_degrees(obj.get(lat_key), "latitude", index=index),
            lon=_as_degrees(obj.get(lon_key), "longitude", index=index),
        )
    raise InvalidCoordinateError("mapping has no latitude/longitude keys", index=index)


def check_bounds(point: GeoPoint, *, bounds: CoordinateBounds = "loose", index: int | None = None) -> GeoPoint:
    """Reject points outside the configured degree ranges."""
    lat_limit = _LAT_LIMIT[bounds]
    if not -lat_limit <= point.lat <= lat_limit:
        raise InvalidCoordinateError(
            f"latitude {point.lat} outside [-{lat_limit:g}, {lat_limit:g}]", index=index
        )
    if not -_LON_LIMIT <= point.lon <= _LON_LIMIT:
        raise InvalidCoordinateError(
            f"longitude {point.lon} outside [-{_LON_LIMIT:g}, {_LON_LIMIT:g}]", index=index
        )
    return point


def to_point(value: Any, *, bounds: CoordinateBounds = "loose", index: int | None = None) -> GeoPoint:
    """Normalize any supported coordinate representation to a bounded `GeoPoint`."""
    if value is None:
        raise InvalidCoordinateError("coordinate is missing", index=index)
    if isinstance(value, Mapping):
        point = _from_mapping(value, index=index)
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        point = from_pair(value, index=index)
    else:
        point = from_accessor(value, index=index)
    return check_bounds(point, bounds=bounds, index=index)


def to_points(values: Sequence[Any], *, bounds: CoordinateBounds = "loose") -> list[GeoPoint]:
    """Normalize a whole dataset; the first bad entry aborts the batch."""
    return [to_point(v, bounds=bounds, index=i) for i, v in enumerate(values)]
