"""Scrubline CLI entry points.
This module exposes commands for cleaning and dataset operations.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import ScrublineConfig
from core.constants import SUPPORTED_IMPUTATION_POLICIES
from core.errors import ScrublineError
from core.types import CleaningOptions
from store.dataset_sdk import ScrublineClient
from transforms.quality_report import render_quality_report


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="scrubline", description="Layoff dataset cleaning CLI")
    parser.add_argument("--data-root", help="Override SCRUBLINE_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_clean_command(subparsers)
    _add_versions_command(subparsers)
    _add_report_command(subparsers)
    _add_export_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Scrubline CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        if args.command == "clean":
            return _run_clean_command(client, args)
        if args.command == "versions":
            return _run_versions_command(client, args)
        if args.command == "report":
            return _run_report_command(client, args)
        if args.command == "export":
            return _run_export_command(client, args)
    except ScrublineError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> ScrublineClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = ScrublineConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return ScrublineClient(config)


def _run_clean_command(client: ScrublineClient, args: argparse.Namespace) -> int:
    """Handle clean command.

    Prints the cleaned version id on the last line.
    """
    options = CleaningOptions(
        dataset_name=args.dataset,
        source_uri=args.source,
        overrides_path=args.overrides,
        imputation_policy=args.imputation_policy or client.config.imputation_policy,
    )
    run = client.clean(options)
    for stage in run.stages:
        print(
            f"{stage.name}\t{stage.input_count}\t{stage.output_count}\t{stage.changed_count}"
        )
    print(f"staging_version={run.staging_version}")
    print(run.cleaned_version)
    return 0


def _run_versions_command(client: ScrublineClient, args: argparse.Namespace) -> int:
    """Handle versions command."""
    dataset = client.dataset(args.dataset)
    for manifest in dataset.list_versions():
        print(
            f"{manifest.version_id}\t"
            f"{manifest.record_count}\t"
            f"{manifest.created_at.isoformat()}\t"
            f"{manifest.parent_version or '-'}"
        )
    return 0


def _run_report_command(client: ScrublineClient, args: argparse.Namespace) -> int:
    """Handle report command."""
    report = client.dataset(args.dataset).report(version_id=args.version_id, top_n=args.top)
    print(render_quality_report(report))
    return 0


def _run_export_command(client: ScrublineClient, args: argparse.Namespace) -> int:
    """Handle export command."""
    output_path = client.dataset(args.dataset).export(args.output, version_id=args.version_id)
    print(output_path)
    return 0


def _add_clean_command(subparsers: Any) -> None:
    """Register clean subcommand."""
    parser = subparsers.add_parser("clean", help="Clean a CSV, JSONL, or Parquet layoff table")
    parser.add_argument("source", help="Source .csv, .jsonl, or .parquet file")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--overrides", help="Optional YAML file of manual industry overrides")
    parser.add_argument(
        "--imputation-policy",
        choices=SUPPORTED_IMPUTATION_POLICIES,
        help="Tie-break policy when sibling rows disagree on industry",
    )


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List dataset versions")
    parser.add_argument("--dataset", required=True, help="Dataset name")


def _add_report_command(subparsers: Any) -> None:
    """Register report subcommand."""
    parser = subparsers.add_parser("report", help="Print quality summary for a version")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--version-id", help="Optional specific version id")
    parser.add_argument("--top", type=int, help="Number of largest layoff events to list")


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export a version to CSV, JSONL, or Parquet")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--output", required=True, help="Destination file path")
    parser.add_argument("--version-id", help="Optional specific version id")
