"""Region annotation of borough boundary GeoJSON for map rendering.

Geometry passes through untouched; classification only ever looks at the
area name.
"""

from __future__ import annotations

from typing import Any

from postcode_finder.search.regions import RegionClassifier

AREA_NAME_PROPERTIES = ("NAME", "name", "LAD25NM")


def area_name(feature: dict[str, Any]) -> str | None:
    properties = feature.get("properties") or {}
    for key in AREA_NAME_PROPERTIES:
        value = properties.get(key)
        if value:
            return value
    return None


def annotate_boundaries(feature_collection: dict[str, Any], classifier: RegionClassifier) -> dict[str, Any]:
    """Keep only covered areas and tag each with its region and colour.

    A ``legend`` member lists every configured region with its colour, in
    table order, for the map key.
    """
    features = []
    for feature in feature_collection.get("features", []):
        name = area_name(feature)
        if name is None or name not in classifier.table:
            continue
        region = classifier.classify(name)
        properties = dict(feature.get("properties") or {})
        properties["area_name"] = name
        properties["region"] = region
        properties["colour"] = classifier.colour_for(region)
        features.append({**feature, "properties": properties})
    legend = [{"region": region, "colour": classifier.colour_for(region)} for region in classifier.regions]
    return {"type": "FeatureCollection", "features": features, "legend": legend}
