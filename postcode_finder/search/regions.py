"""Administrative area to care-region classification."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from postcode_finder.common.constants import DEFAULT_REGION_COLOUR, OUTSIDE_REGION
from postcode_finder.common.models import RegionClassification


class RegionClassifier:
    """Exact, case-sensitive lookup of an area name in a fixed table.

    Names the geocoder spells differently from the table (other casing or
    wording) classify as ``"Outside"``. That is accepted behaviour; there is
    no fuzzy matching.
    """

    def __init__(self, areas: Mapping[str, str], colours: Mapping[str, str] | None = None) -> None:
        self._areas = MappingProxyType(dict(areas))
        self._colours = MappingProxyType(dict(colours or {}))

    @classmethod
    def from_config(cls, regions_config: dict) -> "RegionClassifier":
        return cls(regions_config["areas"], regions_config.get("colours") or {})

    @property
    def table(self) -> Mapping[str, str]:
        return self._areas

    @property
    def regions(self) -> list[str]:
        return list(dict.fromkeys(self._areas.values()))

    def classify(self, area: str | None) -> str:
        if area is None:
            return OUTSIDE_REGION
        return self._areas.get(area, OUTSIDE_REGION)

    def classification(self, area: str | None) -> RegionClassification:
        return RegionClassification(administrative_area=area, region=self.classify(area))

    def colour_for(self, region: str) -> str:
        return self._colours.get(region, DEFAULT_REGION_COLOUR)
