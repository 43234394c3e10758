"""Radius-search CSV export."""

from __future__ import annotations

from pathlib import Path

from postcode_finder.common.fs import render_csv, write_text
from postcode_finder.common.models import Neighbour, ResultSet

DISTANCE_COLUMN = "distance_km"
EXPORT_HEADERS = ["postcode", "latitude", "longitude", DISTANCE_COLUMN]


def export_headers(
    *,
    identifier_column: str = "postcode",
    latitude_column: str = "latitude",
    longitude_column: str = "longitude",
) -> list[str]:
    # Same column names the dataset is ingested with, so exports load back as a dataset.
    return [identifier_column, latitude_column, longitude_column, DISTANCE_COLUMN]


def _serialize_row(item: Neighbour) -> list[str]:
    record = item.record
    return [
        record.identifier,
        repr(float(record.latitude)),
        repr(float(record.longitude)),
        f"{item.distance_km:.4f}",
    ]


def export_result_set(result_set: ResultSet, **columns: str) -> str:
    return render_csv(export_headers(**columns), (_serialize_row(item) for item in result_set.results))


def _format_radius(radius: float) -> str:
    text = repr(float(radius))
    return text[:-2] if text.endswith(".0") else text


def export_filename(result_set: ResultSet) -> str:
    postcode = result_set.reference.normalised_identifier
    return f"postcodes_within_{_format_radius(result_set.parameter)}km_of_{postcode}.csv"


def write_result_csv(path: Path, result_set: ResultSet, **columns: str) -> Path:
    """Write the export to *path*; a directory gets the default file name."""
    if path.is_dir():
        path = path / export_filename(result_set)
    write_text(path, export_result_set(result_set, **columns))
    return path
