import math
from collections import namedtuple
from dataclasses import dataclass

import pytest

from geoanomaly.core.errors import InvalidCoordinateError
from geoanomaly.core.geo import GeoPoint
from geoanomaly.domain.coordinates import CoordinateLike, from_accessor, from_pair, to_point, to_points


@dataclass(frozen=True)
class Fix:
    latitude: float
    longitude: float


class Reading:
    def latitude(self):
        return 25.03

    def longitude(self):
        return 121.56


LatLon = namedtuple("LatLon", ["lat", "lon"])


@pytest.mark.parametrize(
    "value",
    [
        [25.03, 121.56],
        (25.03, 121.56),
        LatLon(25.03, 121.56),
        {"lat": 25.03, "lon": 121.56},
        {"latitude": 25.03, "longitude": 121.56},
        {"lat": 25.03, "lng": 121.56},
        Fix(25.03, 121.56),
        Reading(),
        GeoPoint(25.03, 121.56),
        ["25.03", "121.56"],
    ],
)
def test_supported_representations_normalize_to_the_same_point(value):
    assert to_point(value) == GeoPoint(25.03, 121.56)


def test_accessor_objects_satisfy_the_protocol():
    assert isinstance(Fix(1, 2), CoordinateLike)
    assert isinstance(Reading(), CoordinateLike)
    assert not isinstance(GeoPoint(1, 2), CoordinateLike)
    assert from_accessor(Reading()) == from_pair([25.03, 121.56])


@pytest.mark.parametrize(
    ("value", "message"),
    [
        (None, "coordinate is missing"),
        ([None, 5], "latitude is missing"),
        ([5, None], "longitude is missing"),
        ([1, 2, 3], "got 3 elements"),
        ([True, 5], "must be a number"),
        (["north", 5], "must be a number"),
        ([math.nan, 5], "must be finite"),
        ([5, math.inf], "must be finite"),
        ({"x": 1, "y": 2}, "no latitude/longitude keys"),
        ("25.03,121.56", "neither latitude/longitude nor lat/lon"),
        (object(), "neither latitude/longitude nor lat/lon"),
    ],
)
def test_malformed_coordinates_are_rejected(value, message):
    with pytest.raises(InvalidCoordinateError, match=message):
        to_point(value)


def test_loose_bounds_check_latitude_against_longitude_range():
    # Loose mode accepts a first element beyond +/-90 as long as it is within +/-180.
    assert to_point([120, 10]) == GeoPoint(120, 10)
    with pytest.raises(InvalidCoordinateError, match="latitude 181"):
        to_point([181, 10])


def test_strict_bounds_reject_latitude_beyond_poles():
    assert to_point([90, 180], bounds="strict") == GeoPoint(90, 180)
    with pytest.raises(InvalidCoordinateError, match=r"latitude 120.0 outside \[-90, 90\]"):
        to_point([120, 10], bounds="strict")


@pytest.mark.parametrize("bounds", ["loose", "strict"])
def test_longitude_is_always_bounded(bounds):
    with pytest.raises(InvalidCoordinateError, match="longitude 200"):
        to_point([10, 200], bounds=bounds)


def test_to_points_reports_the_first_bad_index():
    with pytest.raises(InvalidCoordinateError) as exc:
        to_points([[0, 0], [1, 1], [2, None], [None, 3]])
    assert exc.value.index == 2


def test_mapping_prefers_a_complete_key_pair():
    # "lat" alone also belongs to the lat/lon pair; the lat/lng pair must still win.
    assert to_point({"lat": 25.03, "lng": 121.56}, index=0) == GeoPoint(25.03, 121.56)
    assert to_point({"lat": 1, "lon": 2, "lng": 3}) == GeoPoint(1, 2)


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ({"lat": 25.03}, "longitude is missing"),
        ({"lng": 121.56}, "latitude is missing"),
        ({"latitude": 25.03, "lon": 121.56}, "longitude is missing"),
    ],
)
def test_mapping_with_half_a_key_pair_names_the_missing_half(value, message):
    with pytest.raises(InvalidCoordinateError, match=message):
        to_point(value)
