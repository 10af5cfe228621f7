"""Dockstat CLI entry points.
This module exposes the convert and inspect commands.
It maps argparse commands onto pipeline and store calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import DockstatConfig, supported_profiles
from core.constants import (
    BATCH_STRATEGY_RUN,
    BATCH_STRATEGY_SNAPSHOT,
    SUPPORTED_BATCH_STRATEGIES,
    SUPPORTED_BIKES_DERIVATIONS,
    SUPPORTED_COMPRESSIONS,
)
from core.errors import DockstatError
from core.logging_config import configure_cli_logging
from core.types import ConvertOptions
from ingest.pipeline import convert_snapshots
from store.parquet_output import describe_output


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="dockstat",
        description="Convert bike-share station status snapshots to Parquet",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug events")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_convert_command(subparsers)
    _add_inspect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Dockstat CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)
    try:
        if args.command == "convert":
            return _run_convert_command(args)
        if args.command == "inspect":
            return _run_inspect_command(args)
    except DockstatError as error:
        print(f"dockstat: error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_convert_options(args: argparse.Namespace) -> ConvertOptions:
    """Merge environment config with command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Convert options for one run.
    """
    config = DockstatConfig.from_env()
    if args.profile:
        config = replace(config, profile_name=args.profile)
    options = config.convert_options()
    profile = options.profile
    if args.bikes_derivation:
        profile = replace(profile, bikes_derivation=args.bikes_derivation)
    if args.include_disabled is not None:
        profile = replace(profile, include_disabled=args.include_disabled)
    if args.truncate_to_minute is not None:
        profile = replace(profile, truncate_to_minute=args.truncate_to_minute)
    if args.batch_strategy:
        profile = replace(profile, batch_strategy=args.batch_strategy)
    return replace(
        options,
        input_dir=_override_path(args.input_dir, options.input_dir),
        output_path=_override_path(args.output, options.output_path),
        id_map_path=_override_path(args.id_map, options.id_map_path),
        seed_id_map_path=_override_path(args.seed_id_map, options.seed_id_map_path),
        input_pattern=args.pattern or options.input_pattern,
        compression=args.compression or options.compression,
        sort_snapshots=(
            options.sort_snapshots if args.sort_snapshots is None else args.sort_snapshots
        ),
        profile=profile,
    )


def _override_path(raw_value: str | None, default: Path | None) -> Path | None:
    if not raw_value:
        return default
    return Path(raw_value).expanduser().resolve()


def _run_convert_command(args: argparse.Namespace) -> int:
    """Handle convert command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = convert_snapshots(_build_convert_options(args))
    print(f"output_path={result.output_path}")
    print(f"id_map_path={result.id_map_path}")
    print(f"snapshots={result.snapshot_count}")
    print(f"rows={result.row_count}")
    print(f"batches={result.batch_count}")
    print(f"stations={result.station_count}")
    return 0


def _run_inspect_command(args: argparse.Namespace) -> int:
    """Handle inspect command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    summary = describe_output(Path(args.path).expanduser())
    print(f"rows={summary.row_count}")
    print(f"row_groups={summary.row_group_count}")
    print(f"columns={','.join(summary.column_names)}")
    print(f"min_time={summary.min_time.isoformat() if summary.min_time else '-'}")
    print(f"max_time={summary.max_time.isoformat() if summary.max_time else '-'}")
    return 0


def _add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Convert a snapshot directory to Parquet")
    parser.add_argument(
        "input_dir",
        nargs="?",
        help="Snapshot directory, overrides DOCKSTAT_INPUT_DIR",
    )
    parser.add_argument("--output", help="Parquet output path")
    parser.add_argument("--id-map", help="JSON id map output path")
    parser.add_argument("--pattern", help="Glob pattern for snapshot files")
    parser.add_argument("--profile", choices=supported_profiles(), help="Conversion preset")
    parser.add_argument(
        "--bikes-derivation",
        choices=SUPPORTED_BIKES_DERIVATIONS,
        help="standard subtracts e-bikes from available bikes, total keeps the raw count",
    )
    disabled_group = parser.add_mutually_exclusive_group()
    disabled_group.add_argument(
        "--disabled-column",
        dest="include_disabled",
        action="store_true",
        default=None,
        help="Write the num_bikes_disabled column",
    )
    disabled_group.add_argument(
        "--no-disabled-column",
        dest="include_disabled",
        action="store_false",
        help="Omit the num_bikes_disabled column",
    )
    timestamp_group = parser.add_mutually_exclusive_group()
    timestamp_group.add_argument(
        "--truncate-to-minute",
        dest="truncate_to_minute",
        action="store_true",
        default=None,
        help="Floor snapshot timestamps to the minute",
    )
    timestamp_group.add_argument(
        "--raw-timestamps",
        dest="truncate_to_minute",
        action="store_false",
        help="Keep snapshot timestamps as reported",
    )
    parser.add_argument(
        "--batch-strategy",
        choices=SUPPORTED_BATCH_STRATEGIES,
        help=f"{BATCH_STRATEGY_RUN}: one batch per run, {BATCH_STRATEGY_SNAPSHOT}: one per file",
    )
    parser.add_argument("--compression", choices=SUPPORTED_COMPRESSIONS, help="Parquet codec")
    parser.add_argument("--seed-id-map", help="Extend station codes from a prior id map")
    sort_group = parser.add_mutually_exclusive_group()
    sort_group.add_argument(
        "--sort",
        dest="sort_snapshots",
        action="store_true",
        default=None,
        help="Process files in file-name order",
    )
    sort_group.add_argument(
        "--no-sort",
        dest="sort_snapshots",
        action="store_false",
        help="Process files in directory order instead of file-name order",
    )


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Summarize a converted Parquet file")
    parser.add_argument("path", help="Parquet file path")
