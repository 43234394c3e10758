"""Data models used across the finder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class PointRecord:
    identifier: str
    latitude: float
    longitude: float
    attributes: Mapping[str, str] = field(default_factory=dict, compare=False)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class FacilityRecord(PointRecord):
    name: str = ""
    address_lines: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["name"] = self.name
        out["address_lines"] = list(self.address_lines)
        return out


@dataclass(frozen=True)
class Neighbour:
    record: PointRecord
    distance_km: float

    def to_dict(self) -> dict[str, Any]:
        out = self.record.to_dict()
        out["distance_km"] = self.distance_km
        return out


@dataclass(frozen=True)
class ReferenceQuery:
    raw_input: str
    normalised_identifier: str
    coordinate: Coordinate
    source: str  # "dataset" or "geocoder"

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_input": self.raw_input,
            "normalised_identifier": self.normalised_identifier,
            "coordinate": self.coordinate.to_dict(),
            "source": self.source,
        }


@dataclass(frozen=True)
class ResultSet:
    """Neighbours of a reference point, ascending by distance.

    ``parameter`` is the radius in km for radius searches and k for
    nearest-facility searches.
    """

    reference: ReferenceQuery
    parameter: float
    results: tuple[Neighbour, ...] = ()

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference": self.reference.to_dict(),
            "parameter": self.parameter,
            "count": self.count,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True)
class RegionClassification:
    administrative_area: str | None
    region: str

    def to_dict(self) -> dict[str, Any]:
        return {"administrative_area": self.administrative_area, "region": self.region}


@dataclass(frozen=True)
class RegionLookup:
    reference: ReferenceQuery
    classification: RegionClassification
    facilities: ResultSet

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference": self.reference.to_dict(),
            "classification": self.classification.to_dict(),
            "facilities": self.facilities.to_dict(),
        }


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    administrative_area: str | None


@dataclass(frozen=True)
class DatasetDiagnostics:
    total_rows: int = 0
    loaded: int = 0
    invalid_coordinates: int = 0
    missing_identifier: int = 0
    duplicates: int = 0
    invalid_samples: tuple[dict[str, Any], ...] = ()

    @property
    def excluded(self) -> int:
        return self.invalid_coordinates + self.missing_identifier + self.duplicates

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "loaded": self.loaded,
            "invalid_coordinates": self.invalid_coordinates,
            "missing_identifier": self.missing_identifier,
            "duplicates": self.duplicates,
            "excluded": self.excluded,
            "invalid_samples": list(self.invalid_samples),
        }
