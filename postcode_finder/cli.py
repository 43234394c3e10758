"""CLI entrypoint for the nearby postcode finder."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from postcode_finder.common.config_loader import ConfigBundle, load_all_configs, resolve_data_path
from postcode_finder.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_REQUEST_FAILED, EXIT_SUCCESS
from postcode_finder.common.errors import ConfigError, FinderError, NotFoundError, ValidationError
from postcode_finder.common.fs import ensure_dir, read_json, write_json
from postcode_finder.common.logging import build_logger, generate_request_id, log_event
from postcode_finder.geocode.resolver import build_resolver
from postcode_finder.search.boundaries import annotate_boundaries
from postcode_finder.search.coordinator import QueryCoordinator
from postcode_finder.search.dataset import DatasetStore, load_facilities_csv
from postcode_finder.search.export import write_result_csv
from postcode_finder.search.regions import RegionClassifier


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--postcode", default=None)
    parser.add_argument("--radius", default=None)
    parser.add_argument("--output", default=None)
    parser.add_argument("--export", action="store_true")
    parser.add_argument("--geojson", default=None)
    parser.add_argument("--request-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def load_store(bundle: ConfigBundle, data_dir: Path) -> DatasetStore:
    dataset_cfg = bundle.finder["dataset"]
    path = resolve_data_path(dataset_cfg["path"], data_dir)
    if not path.exists():
        raise ConfigError(f"Dataset file not found: {path}")
    return DatasetStore.from_csv(
        path,
        identifier_column=dataset_cfg["identifier_column"],
        latitude_column=dataset_cfg["latitude_column"],
        longitude_column=dataset_cfg["longitude_column"],
    )


def load_facility_set(bundle: ConfigBundle, data_dir: Path):
    facilities_cfg = bundle.finder["facilities"]
    path = resolve_data_path(facilities_cfg["path"], data_dir)
    if not path.exists():
        return ()
    return load_facilities_csv(
        path,
        identifier_column=facilities_cfg["identifier_column"],
        latitude_column=facilities_cfg["latitude_column"],
        longitude_column=facilities_cfg["longitude_column"],
        name_column=facilities_cfg["name_column"],
        address_columns=facilities_cfg["address_columns"],
    )


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def execute_command(args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path) -> None:
    classifier = RegionClassifier.from_config(bundle.regions)

    if args.command == "boundaries":
        if not args.geojson or not args.output:
            raise ValidationError("boundaries needs --geojson and --output")
        annotated = annotate_boundaries(read_json(Path(args.geojson)), classifier)
        write_json(Path(args.output), annotated)
        return

    store = load_store(bundle, data_dir)

    if args.command == "stats":
        _print_json({"records": len(store), "diagnostics": store.diagnostics.to_dict()})
        return

    if args.command == "radius":
        # The geocoder is never called for radius searches.
        coordinator = QueryCoordinator(store, classifier, resolver=None)
        result_set = coordinator.radius_search(args.postcode or "", args.radius)
        if args.export or args.output:
            if args.output:
                output = Path(args.output)
            else:
                output = resolve_data_path(bundle.finder["export"]["directory"], data_dir)
                ensure_dir(output)
            dataset_cfg = bundle.finder["dataset"]
            write_result_csv(
                output,
                result_set,
                identifier_column=dataset_cfg["identifier_column"],
                latitude_column=dataset_cfg["latitude_column"],
                longitude_column=dataset_cfg["longitude_column"],
            )
        _print_json(result_set.to_dict())
        return

    if args.command == "region":
        resolver = build_resolver(bundle.finder["geocoder"])
        try:
            coordinator = QueryCoordinator(
                store,
                classifier,
                resolver,
                facilities=load_facility_set(bundle, data_dir),
                facility_k=int(bundle.finder["facilities"]["k"]),
            )
            _print_json(coordinator.region_lookup(args.postcode or "").to_dict())
        finally:
            resolver.close()
        return

    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    request_id = args.request_id or generate_request_id()
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    log_dir = Path(args.log_dir) if args.log_dir else None

    logger = build_logger(request_id, log_dir=log_dir, level=args.log_level)
    bundle = load_all_configs(Path(args.config_dir), overlay_config_dir=overlay_config_dir)

    log_event(logger, "command start", operation=args.command, event="COMMAND_START", status="ok")
    try:
        execute_command(args, bundle, data_dir)
    except (ValidationError, NotFoundError) as exc:
        log_event(
            logger,
            str(exc),
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_REQUEST_FAILED
    except FinderError as exc:
        log_event(
            logger,
            str(exc),
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    log_event(logger, "command end", operation=args.command, event="COMMAND_END", status="ok")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except FinderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception as exc:
        print(f"Unexpected error: {exc!r}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
