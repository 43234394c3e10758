"""UK postcode identifier normalisation and validation."""

from __future__ import annotations

import re

UK_UNIT_POSTCODE_RE = re.compile(r"^([A-Z]{1,2}\d[A-Z\d]?)\s(\d[A-Z]{2})$")

_PUNCTUATION_RE = re.compile(r"[\.,;:'\"`_\-/\\()\[\]{}|~!?@#$%^&*+=]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalise_identifier(raw: str | None) -> str:
    """Key form used for every identifier comparison: no whitespace, upper case."""
    if raw is None:
        return ""
    return _WHITESPACE_RE.sub("", raw).upper()


def is_valid_uk_unit_postcode(value: str) -> bool:
    return bool(UK_UNIT_POSTCODE_RE.match(value))


def format_postcode(raw: str | None) -> str | None:
    """Return the 'AREA NNN' display form of *raw*, or None if it is not a unit postcode."""
    cleaned = normalise_identifier(raw)
    if not cleaned:
        return None

    cleaned = _PUNCTUATION_RE.sub("", cleaned)
    if len(cleaned) < 5 or len(cleaned) > 7:
        return None

    cleaned = f"{cleaned[:-3]} {cleaned[-3:]}"

    if not is_valid_uk_unit_postcode(cleaned):
        return None

    return cleaned
