"""In-memory store of geocoded postcode records, built once from tabular rows."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Sequence

from postcode_finder.common.errors import ContractError, DataIntegrityError, NotFoundError
from postcode_finder.common.fs import read_csv_rows
from postcode_finder.common.logging import log_event
from postcode_finder.common.models import DatasetDiagnostics, FacilityRecord, PointRecord
from postcode_finder.common.postcode import normalise_identifier

logger = logging.getLogger(__name__)

MAX_INVALID_SAMPLES = 50


def _safe_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_valid_lat_lon(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def parse_coordinates(raw_lat: str | None, raw_lon: str | None) -> tuple[float, float]:
    """Parse a latitude/longitude pair, raising DataIntegrityError if unusable."""
    lat = _safe_float(raw_lat)
    lon = _safe_float(raw_lon)
    if not is_valid_lat_lon(lat, lon):
        raise DataIntegrityError(f"Unusable coordinates: latitude={raw_lat!r} longitude={raw_lon!r}")
    return lat, lon


def _header_index(header: Sequence[str], required: Sequence[str]) -> dict[str, int]:
    names = [name.strip() for name in header]
    missing = [column for column in required if column not in names]
    if missing:
        raise ContractError(f"Dataset header is missing columns: {', '.join(missing)}")
    index: dict[str, int] = {}
    for position, name in enumerate(names):
        # First column wins when a header name repeats.
        index.setdefault(name, position)
    return index


def _row_values(row: Sequence[str], index: Mapping[str, int]) -> dict[str, str | None]:
    values: dict[str, str | None] = {}
    for name, position in index.items():
        values[name] = row[position].strip() if position < len(row) else None
    return values


class DatasetStore:
    """Immutable snapshot of valid point records keyed by normalised identifier.

    Invalid rows are excluded and counted in ``diagnostics``; when an
    identifier repeats, the first row wins and later rows are counted as
    duplicates.
    """

    def __init__(
        self,
        records: Iterable[PointRecord],
        diagnostics: DatasetDiagnostics | None = None,
    ) -> None:
        records = tuple(records)
        by_key: dict[str, PointRecord] = {}
        ordered: list[PointRecord] = []
        invalid_coordinates = 0
        missing_identifier = 0
        duplicates = 0
        for record in records:
            key = normalise_identifier(record.identifier)
            if not key:
                missing_identifier += 1
                continue
            if not is_valid_lat_lon(record.latitude, record.longitude):
                invalid_coordinates += 1
                continue
            if key in by_key:
                duplicates += 1
                continue
            by_key[key] = record
            ordered.append(record)
        self._by_key = MappingProxyType(by_key)
        self._records = tuple(ordered)
        self.diagnostics = diagnostics or DatasetDiagnostics(
            total_rows=len(records),
            loaded=len(ordered),
            invalid_coordinates=invalid_coordinates,
            missing_identifier=missing_identifier,
            duplicates=duplicates,
        )

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[str]],
        *,
        identifier_column: str = "postcode",
        latitude_column: str = "latitude",
        longitude_column: str = "longitude",
    ) -> "DatasetStore":
        if not rows:
            return cls(())

        index = _header_index(rows[0], [identifier_column, latitude_column, longitude_column])
        passthrough = [name for name in index if name not in (identifier_column, latitude_column, longitude_column)]

        seen: set[str] = set()
        records: list[PointRecord] = []
        invalid_coordinates = 0
        missing_identifier = 0
        duplicates = 0
        invalid_samples: list[dict[str, Any]] = []

        for line_no, row in enumerate(rows[1:], start=2):
            values = _row_values(row, index)
            identifier = values[identifier_column] or ""
            key = normalise_identifier(identifier)
            if not key:
                missing_identifier += 1
                continue

            try:
                lat, lon = parse_coordinates(values[latitude_column], values[longitude_column])
            except DataIntegrityError as exc:
                invalid_coordinates += 1
                if len(invalid_samples) < MAX_INVALID_SAMPLES:
                    invalid_samples.append({"line": line_no, "identifier": identifier, "reason": str(exc)})
                continue

            if key in seen:
                duplicates += 1
                logger.debug("dropping duplicate identifier %s on line %d", identifier, line_no)
                continue
            seen.add(key)

            attributes = {name: values[name] or "" for name in passthrough}
            records.append(PointRecord(identifier=identifier, latitude=lat, longitude=lon, attributes=attributes))

        diagnostics = DatasetDiagnostics(
            total_rows=len(rows) - 1,
            loaded=len(records),
            invalid_coordinates=invalid_coordinates,
            missing_identifier=missing_identifier,
            duplicates=duplicates,
            invalid_samples=tuple(invalid_samples),
        )
        log_event(
            logger,
            "dataset loaded",
            event="DATASET_LOADED",
            status="ok" if diagnostics.excluded == 0 else "partial",
            rows_in=diagnostics.total_rows,
            rows_out=diagnostics.loaded,
        )
        return cls(records, diagnostics)

    @classmethod
    def from_csv(cls, path: Path, **columns: str) -> "DatasetStore":
        return cls.from_rows(read_csv_rows(path), **columns)

    @property
    def records(self) -> tuple[PointRecord, ...]:
        return self._records

    def get(self, identifier: str) -> PointRecord | None:
        return self._by_key.get(normalise_identifier(identifier))

    def lookup(self, identifier: str) -> PointRecord:
        record = self.get(identifier)
        if record is None:
            raise NotFoundError(f"Postcode not found in dataset: {identifier!r}")
        return record

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.get(identifier) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PointRecord]:
        return iter(self._records)


def load_facilities(
    rows: Sequence[Sequence[str]],
    *,
    identifier_column: str = "postcode",
    latitude_column: str = "latitude",
    longitude_column: str = "longitude",
    name_column: str = "name",
    address_columns: Sequence[str] = ("address_1", "address_2", "address_3"),
) -> tuple[FacilityRecord, ...]:
    """Build the facility candidate set; rows without usable coordinates are skipped."""
    if not rows:
        return ()

    index = _header_index(rows[0], [identifier_column, latitude_column, longitude_column, name_column])
    facilities: list[FacilityRecord] = []
    skipped = 0
    for row in rows[1:]:
        values = _row_values(row, index)
        try:
            lat, lon = parse_coordinates(values[latitude_column], values[longitude_column])
        except DataIntegrityError:
            skipped += 1
            continue
        address_lines = tuple(values.get(column) or "" for column in address_columns)
        facilities.append(
            FacilityRecord(
                identifier=values[identifier_column] or "",
                latitude=lat,
                longitude=lon,
                name=values[name_column] or "",
                address_lines=tuple(line for line in address_lines if line),
            )
        )

    log_event(
        logger,
        "facilities loaded",
        event="FACILITIES_LOADED",
        status="ok" if skipped == 0 else "partial",
        rows_in=len(rows) - 1,
        rows_out=len(facilities),
    )
    return tuple(facilities)


def load_facilities_csv(path: Path, **columns: Any) -> tuple[FacilityRecord, ...]:
    return load_facilities(read_csv_rows(path), **columns)
