import math

import pytest
from pyproj import Geod

from postcode_finder.common.models import Coordinate
from postcode_finder.search.distance import EARTH_RADIUS_KM, clamp, haversine_km

POINTS = [
    Coordinate(0.0, 0.0),
    Coordinate(0.01, 0.0),
    Coordinate(51.29711, -0.33206),
    Coordinate(51.4600, -0.3030),
    Coordinate(-33.8688, 151.2093),
    Coordinate(89.9999, 10.0),
    Coordinate(-90.0, 0.0),
    Coordinate(0.0, 180.0),
    Coordinate(0.0, -180.0),
]


def test_identical_points_are_exactly_zero():
    for point in POINTS:
        assert haversine_km(point, point) == 0.0


def test_distance_is_symmetric():
    for a in POINTS:
        for b in POINTS:
            assert haversine_km(a, b) == haversine_km(b, a)


def test_distance_is_non_negative_and_finite():
    for a in POINTS:
        for b in POINTS:
            d = haversine_km(a, b)
            assert d >= 0.0
            assert math.isfinite(d)


@pytest.mark.parametrize(
    ("a", "b"),
    [
        (Coordinate(0.0, 0.0), Coordinate(0.0, 180.0)),
        (Coordinate(10.0, 20.0), Coordinate(-10.0, -160.0)),
        (Coordinate(90.0, 0.0), Coordinate(-90.0, 0.0)),
    ],
)
def test_antipodal_points_give_half_circumference(a, b):
    d = haversine_km(a, b)
    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-8)


def test_near_identical_points_do_not_fail():
    a = Coordinate(51.5, -0.1)
    b = Coordinate(51.5 + 1e-12, -0.1 - 1e-12)
    d = haversine_km(a, b)
    assert 0.0 <= d < 1e-6


def test_equator_hundredth_of_a_degree():
    d = haversine_km(Coordinate(0.0, 0.0), Coordinate(0.01, 0.0))
    assert d == pytest.approx(1.1119, abs=1e-4)


@pytest.mark.parametrize("distance_km", [0.1, 1.0, 8.04672, 25.0, 100.0])
def test_matches_spherical_geodesic_for_short_ranges(distance_km):
    geod = Geod(a=EARTH_RADIUS_KM * 1000.0, b=EARTH_RADIUS_KM * 1000.0)
    start_lat, start_lon = 51.29711, -0.33206
    end_lon, end_lat, _ = geod.fwd(start_lon, start_lat, 37.0, distance_km * 1000.0)
    _, _, expected_m = geod.inv(start_lon, start_lat, end_lon, end_lat)

    d = haversine_km(Coordinate(start_lat, start_lon), Coordinate(end_lat, end_lon))

    assert d == pytest.approx(expected_m / 1000.0, rel=1e-6)


def test_clamp_within_bounds():
    assert clamp(-1e-17, minimum=0.0, maximum=1.0) == 0.0
    assert clamp(0.5, minimum=0.0, maximum=1.0) == 0.5
    assert clamp(1.0000000000000002, minimum=0.0, maximum=1.0) == 1.0
