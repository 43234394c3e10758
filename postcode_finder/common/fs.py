"""Filesystem helpers."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Iterable, Sequence


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def parse_csv_text(text: str) -> list[list[str]]:
    """Split comma-delimited text into rows, header first; blank lines are dropped."""
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if row]


def read_csv_rows(path: Path) -> list[list[str]]:
    # utf-8-sig swallows the BOM spreadsheet exports put in front of the header.
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        return [row for row in csv.reader(f) if row]


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def write_text(path: Path, text: str) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
