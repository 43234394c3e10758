"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from postcode_finder.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_finder_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"dataset", "facilities", "geocoder", "export"}
    _assert_mapping(cfg, "finder config")
    _assert_required_keys(cfg, top_required, "finder config")
    _assert_no_unknown_keys(cfg, top_required, "finder config", allow_unknown)

    dataset = _assert_mapping(cfg["dataset"], "dataset")
    _assert_required_keys(
        dataset,
        {"path", "identifier_column", "latitude_column", "longitude_column"},
        "dataset",
    )

    facilities = _assert_mapping(cfg["facilities"], "facilities")
    _assert_required_keys(
        facilities,
        {"path", "identifier_column", "latitude_column", "longitude_column", "name_column", "address_columns", "k"},
        "facilities",
    )
    k = facilities["k"]
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise ConfigError("facilities.k must be a positive integer")
    if not isinstance(facilities["address_columns"], list):
        raise ConfigError("facilities.address_columns must be a list")

    geocoder = _assert_mapping(cfg["geocoder"], "geocoder")
    _assert_required_keys(geocoder, {"base_url", "timeout_seconds", "max_attempts", "rate_per_sec"}, "geocoder")
    _assert_required_keys(
        _assert_mapping(geocoder["timeout_seconds"], "geocoder.timeout_seconds"),
        {"connect", "read"},
        "geocoder.timeout_seconds",
    )
    if int(geocoder["max_attempts"]) < 1:
        raise ConfigError("geocoder.max_attempts must be at least 1")
    if float(geocoder["rate_per_sec"]) <= 0:
        raise ConfigError("geocoder.rate_per_sec must be positive")

    _assert_required_keys(_assert_mapping(cfg["export"], "export"), {"directory"}, "export")

    return cfg


def validate_regions_config(cfg: dict) -> dict:
    _assert_mapping(cfg, "regions config")
    _assert_required_keys(cfg, {"areas"}, "regions config")
    areas = _assert_mapping(cfg["areas"], "regions.areas")
    if not areas:
        raise ConfigError("regions.areas must be a non-empty mapping")

    for area, region in areas.items():
        if not isinstance(area, str) or not isinstance(region, str) or not region:
            raise ConfigError(f"regions.areas entry {area!r} must map a name to a region name")

    colours = _assert_mapping(cfg.get("colours") or {}, "regions.colours")
    known_regions = set(areas.values())
    unknown = set(colours) - known_regions
    if unknown:
        raise ConfigError(f"Colours for unknown regions: {', '.join(sorted(unknown))}")

    return cfg
