"""Radius and k-nearest-neighbour queries by linear scan."""

from __future__ import annotations

import math
from typing import Iterable

from postcode_finder.common.errors import ValidationError
from postcode_finder.common.models import Coordinate, Neighbour, PointRecord
from postcode_finder.search.dataset import DatasetStore, is_valid_lat_lon
from postcode_finder.search.distance import haversine_km


def _by_distance(item: Neighbour) -> float:
    return item.distance_km


def validate_radius(radius_km: float) -> float:
    if isinstance(radius_km, bool) or not isinstance(radius_km, (int, float)):
        raise ValidationError(f"Radius must be a number, got {radius_km!r}")
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise ValidationError(f"Radius must be a positive number of kilometres, got {radius_km!r}")
    return float(radius_km)


def validate_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise ValidationError(f"k must be a positive integer, got {k!r}")
    return k


def radius_query(store: DatasetStore, center: Coordinate, radius_km: float) -> tuple[Neighbour, ...]:
    """Every record within ``radius_km`` (inclusive) of ``center``, nearest first.

    Equal distances keep dataset order.
    """
    radius_km = validate_radius(radius_km)
    within = []
    for record in store.records:
        distance = haversine_km(center, record.coordinate)
        if distance <= radius_km:
            within.append(Neighbour(record=record, distance_km=distance))
    return tuple(sorted(within, key=_by_distance))


def nearest_k_query(center: Coordinate, k: int, candidates: Iterable[PointRecord]) -> tuple[Neighbour, ...]:
    """The ``k`` candidates closest to ``center``, nearest first.

    Candidates without usable coordinates are ignored; fewer than ``k`` valid
    candidates returns all of them. Ties keep candidate order.
    """
    k = validate_k(k)
    scored = [
        Neighbour(record=candidate, distance_km=haversine_km(center, candidate.coordinate))
        for candidate in candidates
        if is_valid_lat_lon(candidate.latitude, candidate.longitude)
    ]
    return tuple(sorted(scored, key=_by_distance)[:k])
