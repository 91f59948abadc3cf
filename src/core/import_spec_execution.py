"""Shared import-spec execution engine for CLI and SDK workflows.

This module maps validated import-spec steps to client operations so
different entry points execute one declarative batch path without drift.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.errors import StratumImportSpecError
from core.import_spec import ImportSpec, ImportSpecStep, load_import_spec
from core.import_spec_fields import reject_unknown_fields, required_string
from core.types import ImportOptions, ImportResult, PartitionCandidate


class ImportSpecClient(Protocol):
    """Client API contract required by import-spec execution."""

    def with_strata_root(self, strata_root: str) -> Any: ...

    def import_stratum(self, options: ImportOptions) -> ImportResult: ...

    def list_partitions(self, raw_image: str) -> list[PartitionCandidate]: ...


def execute_import_spec_file(client: ImportSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute an import-spec file, returning printable output lines."""
    spec = load_import_spec(spec_file)
    return execute_import_spec(client, spec)


def execute_import_spec(client: ImportSpecClient, spec: ImportSpec) -> tuple[str, ...]:
    """Execute a parsed import spec and return output lines.

    Steps run in order; the first failing step stops the batch.
    """
    execution_client = (
        client.with_strata_root(spec.defaults.strata_root) if spec.defaults.strata_root else client
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(execution_client, step))
    return tuple(output_lines)


def _execute_step(client: ImportSpecClient, step: ImportSpecStep) -> tuple[str, ...]:
    if step.command == "import":
        return (_execute_import_step(client, step),)
    if step.command == "partitions":
        return _execute_partitions_step(client, step)
    raise StratumImportSpecError(f"Unsupported import-spec command '{step.command}'.")


def _execute_import_step(client: ImportSpecClient, step: ImportSpecStep) -> str:
    reject_unknown_fields(step.args, {"name", "source"}, step.command)
    options = ImportOptions(
        stratum_name=required_string(step.args, "name"),
        source_path=required_string(step.args, "source"),
    )
    return str(client.import_stratum(options).destination)


def _execute_partitions_step(client: ImportSpecClient, step: ImportSpecStep) -> tuple[str, ...]:
    reject_unknown_fields(step.args, {"image"}, step.command)
    candidates = client.list_partitions(required_string(step.args, "image"))
    return tuple(format_partition_row(candidate) for candidate in candidates)


def format_partition_row(candidate: PartitionCandidate) -> str:
    """Render one partition candidate as a tab-separated output row."""
    return f"{candidate.number}\t{candidate.table_format}\t{candidate.byte_offset}"
