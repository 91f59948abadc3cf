"""Import-spec CLI command wiring.

This module registers the run-spec subcommand and delegates execution to the
shared import-spec engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from core.import_spec_execution import execute_import_spec_file
from ingest.import_sdk import StratumImportClient


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run a declarative YAML batch of imports",
    )
    parser.add_argument("spec_file", help="Path to YAML import-spec file")


def run_run_spec_command(client: StratumImportClient, args: argparse.Namespace) -> int:
    """Handle run-spec command invocation."""
    output_lines = execute_import_spec_file(client, args.spec_file)
    for line in output_lines:
        print(line)
    return 0
