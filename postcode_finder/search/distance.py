"""Great-circle distance on a spherical Earth."""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from postcode_finder.common.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def clamp(value: float, *, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in kilometres between two WGS84 points in degrees.

    The haversine term is clamped to [0, 1]: rounding can push it just past
    either bound for near-identical or antipodal points, which would make
    ``sqrt(1 - h)`` fail.
    """
    # Canonical argument order so d(a, b) and d(b, a) are bit-for-bit equal.
    if (b.latitude, b.longitude) < (a.latitude, a.longitude):
        a, b = b, a

    phi1 = radians(a.latitude)
    phi2 = radians(b.latitude)
    d_phi = radians(b.latitude - a.latitude)
    d_lambda = radians(b.longitude - a.longitude)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    h = clamp(h, minimum=0.0, maximum=1.0)
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))
