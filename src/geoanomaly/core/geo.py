from __future__ import annotations
from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt
from typing import Iterable, Literal

"""
Geospatial helpers.

A tiny geometry layer for great-circle distances on a spherical Earth. We do not
pull in heavier GIS dependencies: the detector only needs haversine distances
and a coordinate-wise mean.
"""

DistanceUnit = Literal["kilometers", "miles"]

# Mean Earth radius per output unit.
EARTH_RADIUS: dict[str, float] = {
    "kilometers": 6371.0,
    "miles": 3958.8,
}

_UNIT_ALIASES: dict[str, DistanceUnit] = {
    "kilometers": "kilometers",
    "kilometer": "kilometers",
    "kilometres": "kilometers",
    "kilometre": "kilometers",
    "km": "kilometers",
    "miles": "miles",
    "mile": "miles",
    "mi": "miles",
}


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def normalize_unit(value: str | None) -> DistanceUnit | None:
    """Map a unit name or alias to its canonical form (None if unrecognized)."""
    if value is None:
        return None
    return _UNIT_ALIASES.get(str(value).strip().lower())


def earth_radius(unit: DistanceUnit) -> float:
    return EARTH_RADIUS[unit]


def haversine(a: GeoPoint, b: GeoPoint, *, radius: float = EARTH_RADIUS["kilometers"]) -> float:
    """Great-circle distance between two points on a sphere of `radius`.

    The haversine form is equivalent to the spherical law of cosines on
    colatitudes but keeps precision for very small separations.
    """
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push `h` a hair above 1 for antipodal points.
    return 2 * radius * asin(sqrt(min(1.0, h)))


def centroid(points: Iterable[GeoPoint]) -> GeoPoint:
    """Coordinate-wise arithmetic mean (not a spherical center of mass)."""
    pts = list(points)
    if not pts:
        raise ValueError("centroid of an empty point set is undefined")
    n = len(pts)
    return GeoPoint(lat=sum(p.lat for p in pts) / n, lon=sum(p.lon for p in pts) / n)
