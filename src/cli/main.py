"""stratum-import CLI entry points.
This module exposes commands for importing strata and inspecting images.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.errors import StratumError
from core.import_spec_execution import format_partition_row
from core.types import ImportOptions
from ingest.import_sdk import StratumImportClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="stratum-import",
        description="Import a directory, tarball, or VM disk image as a new stratum",
    )
    parser.add_argument("--strata-root", help="Override STRATUM_STRATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_partitions_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the stratum-import CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.strata_root)
        if args.command == "import":
            return _run_import_command(client, args)
        if args.command == "partitions":
            return _run_partitions_command(client, args)
        if args.command == "run-spec":
            return run_run_spec_command(client, args)
    except StratumError as error:
        print(f"ERROR: {error}", file=sys.stderr)
        rollback_notes = getattr(error, "__notes__", [])
        for note in rollback_notes:
            print(note, file=sys.stderr)
        if not rollback_notes:
            print("Cleaned up.", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(strata_root: str | None) -> StratumImportClient:
    """Build SDK client with optional strata-root override.

    Args:
        strata_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    client = StratumImportClient()
    if strata_root:
        client = client.with_strata_root(strata_root)
    return client


def _run_import_command(client: StratumImportClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = ImportOptions(stratum_name=args.name, source_path=args.source)
    result = client.import_stratum(options)
    print(result.destination)
    return 0


def _run_partitions_command(client: StratumImportClient, args: argparse.Namespace) -> int:
    """Handle partitions command."""
    for candidate in client.list_partitions(args.image):
        print(format_partition_row(candidate))
    return 0


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a source as a new stratum")
    parser.add_argument("name", help="Name of the new stratum")
    parser.add_argument(
        "source",
        help="Directory, tarball (.tar, .tar.gz, ...), or disk image (.qcow2, .vdi, .vmdk, ...)",
    )


def _add_partitions_command(subparsers: Any) -> None:
    """Register partitions subcommand."""
    parser = subparsers.add_parser(
        "partitions",
        help="List Linux partition candidates of a raw disk image",
    )
    parser.add_argument("image", help="Raw disk image path")
