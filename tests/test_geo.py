import math

import pytest

from geoanomaly.core.geo import EARTH_RADIUS, GeoPoint, centroid, haversine, normalize_unit


def test_one_degree_of_longitude_at_the_equator():
    d = haversine(GeoPoint(0, 0), GeoPoint(0, 1))
    assert d == pytest.approx(6371.0 * math.pi / 180)


def test_antipodal_points_are_half_a_circumference_apart():
    d = haversine(GeoPoint(0, 0), GeoPoint(0, 180), radius=EARTH_RADIUS["miles"])
    assert d == pytest.approx(math.pi * 3958.8)


def test_matches_law_of_cosines_on_colatitudes():
    a = GeoPoint(25.0478, 121.5170)
    b = GeoPoint(35.6895, 139.6917)

    phi1, phi2 = math.pi / 2 - math.radians(a.lat), math.pi / 2 - math.radians(b.lat)
    theta1, theta2 = math.radians(a.lon), math.radians(b.lon)
    angle = math.acos(
        math.cos(phi1) * math.cos(phi2) + math.sin(phi1) * math.sin(phi2) * math.cos(theta1 - theta2)
    )

    assert haversine(a, b) == pytest.approx(angle * 6371.0)


def test_tiny_separation_stays_positive():
    d = haversine(GeoPoint(10.0, 10.0), GeoPoint(10.0, 10.0 + 1e-9))
    assert 0 < d < 1e-6


def test_centroid_is_coordinate_wise_mean():
    c = centroid([GeoPoint(0, 0), GeoPoint(10, 20), GeoPoint(20, -20)])
    assert c == GeoPoint(lat=10.0, lon=0.0)

    with pytest.raises(ValueError):
        centroid([])


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("km", "kilometers"), (" Kilometers ", "kilometers"), ("MI", "miles"), ("mile", "miles"), ("yards", None), (None, None)],
)
def test_normalize_unit(raw, expected):
    assert normalize_unit(raw) == expected
