"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from postcode_finder.common.errors import ConfigError
from postcode_finder.common.fs import read_yaml
from postcode_finder.common.schema import validate_finder_config, validate_regions_config

CONFIG_FILES = ("finder.yml", "regions.yml")


@dataclass(frozen=True)
class ConfigBundle:
    finder: dict
    regions: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    loaded = {}
    for name in CONFIG_FILES:
        overlay_path = None
        if overlay_config_dir is not None:
            overlay_path = overlay_config_dir / name
        loaded[name] = _load_yaml_with_overlay(config_dir / name, overlay_path)

    finder = validate_finder_config(loaded["finder.yml"], allow_unknown=allow_unknown)
    regions = validate_regions_config(loaded["regions.yml"])
    return ConfigBundle(finder=finder, regions=regions)


def resolve_data_path(value: str, data_dir: Path) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return data_dir / path
