"""
Stash Scanner Command Line
==========================

Entry point for scanning a world save.

Commands:
    search-dupe-stashes  Flag clusters of containers holding too many items
    read-level-dat       Print the decoded level.dat as JSON

Usage:
    stash-scanner ./world search-dupe-stashes
    stash-scanner ./world search-dupe-stashes --area="-20,-20;20,20" --radius 2
    stash-scanner ./world search-dupe-stashes --threshold 500 --json absolute
    stash-scanner --config config.yaml ./world read-level-dat

Exit Status:
    0  Scan finished without warnings
    1  Scan finished and emitted warnings
    2  Usage, configuration or save data error, or unsupported mode
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nbt.nbt import MalformedFileError

from stash_scanner import __version__
from stash_scanner.config import ConfigLoadError, Settings, load_config, setup_logging
from stash_scanner.detection import DuplicateStashDetector, ItemGroupResolver, StashProjector
from stash_scanner.models.output import ScanReport
from stash_scanner.models.stash import AbsoluteMode, Area, DetectionMode, GrowthRateMode
from stash_scanner.savedata import WorldSave


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_WARNINGS = 1
EXIT_ERROR = 2


# =============================================================================
# Argument Parsing
# =============================================================================

def _area_arg(value: str) -> Area:
    try:
        return Area.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stash-scanner",
        description="Detect likely item-duplication stashes in a world save",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Config file (JSON or YAML); defaults to a search of common locations",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, WARNING...)",
    )
    parser.add_argument("world_dir", help="World save directory")

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser(
        "search-dupe-stashes",
        help="Flag clusters of nearby containers holding too many items",
    )
    search.add_argument(
        "-a", "--area",
        type=_area_arg,
        default=None,
        help='Area of chunks as --area=<x1>,<z1>;<x2>,<z2>; defaults to every record',
    )
    search.add_argument(
        "-r", "--radius",
        type=int,
        default=None,
        help="Radius of chunks searched around each container (config default: 1)",
    )
    search.add_argument(
        "-t", "--threshold",
        type=int,
        default=None,
        help="Global item threshold (overrides config)",
    )
    search.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    modes = search.add_subparsers(dest="mode")
    modes.add_parser(
        "absolute",
        help="Warn for every group with more items than the threshold in an area (default)",
    )
    growth = modes.add_parser(
        "growth-rate",
        help="Warn when a group grows faster than the threshold (not implemented)",
    )
    growth.add_argument(
        "-f", "--file-location",
        type=Path,
        default=None,
        help="Previous scan to compare against",
    )

    commands.add_parser("read-level-dat", help="Print the decoded level.dat as JSON")

    return parser


# =============================================================================
# Commands
# =============================================================================

def _select_mode(args: argparse.Namespace, settings: Settings) -> DetectionMode:
    if args.mode == "growth-rate":
        return GrowthRateMode(file_location=args.file_location)
    threshold = args.threshold
    if threshold is None:
        threshold = settings.search_dupe_stashes.threshold
    return AbsoluteMode(threshold=threshold)


def _print_report(report: ScanReport, as_json: bool) -> None:
    if as_json:
        print(report.model_dump_json(indent=2))
        return

    if not report.warnings:
        print(f"No suspicious stashes among {report.records_scanned} records.")
        return

    print(
        f"{len(report.warnings)} suspicious stash cluster(s) among "
        f"{report.records_scanned} records (radius={report.radius}):"
    )
    for warning in report.warnings:
        print(f"  - {warning.describe()}")


def search_dupe_stashes(args: argparse.Namespace, settings: Settings) -> int:
    """Run a duplicate stash scan and print the report."""
    search = settings.search_dupe_stashes
    radius = search.radius if args.radius is None else args.radius
    if radius < 0:
        logger.error("Radius must be non-negative")
        return EXIT_ERROR

    mode = _select_mode(args, settings)
    if isinstance(mode, GrowthRateMode):
        logger.error("Growth rate mode is not implemented")
        return EXIT_ERROR

    resolver = ItemGroupResolver.from_config(search)
    detector = DuplicateStashDetector(
        resolver,
        radius=radius,
        mode=mode,
        capacity=settings.index.capacity,
        max_depth=settings.index.max_depth,
    )

    save = WorldSave(args.world_dir)
    records = StashProjector(resolver).project_world(
        save.iter_players(),
        save.iter_containers(),
    )
    report = detector.detect(records, args.area)

    _print_report(report, args.json)
    return EXIT_WARNINGS if report.warnings else EXIT_OK


def read_level_dat(args: argparse.Namespace, settings: Settings) -> int:
    """Print the decoded level.dat. Takes settings only to share the command signature."""
    data = WorldSave(args.world_dir).read_level_dat()
    print(json.dumps(data, indent=2, default=str))
    return EXIT_OK


COMMANDS = {
    "search-dupe-stashes": search_dupe_stashes,
    "read-level-dat": read_level_dat,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_config(args.config)
    except ConfigLoadError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.log_level:
        settings = settings.model_copy(update={
            "logging": settings.logging.model_copy(update={"level": args.log_level}),
        })
    setup_logging(settings)

    try:
        return COMMANDS[args.command](args, settings)
    except (FileNotFoundError, MalformedFileError) as e:
        logger.error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
