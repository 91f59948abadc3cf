"""Type-safe field parsing helpers for import-spec execution."""

from __future__ import annotations

from typing import Mapping

from core.errors import StratumImportSpecError


def required_string(args: Mapping[str, object], field_name: str) -> str:
    """Read a required string field from an import-spec step."""
    value = optional_string(args, field_name)
    if value is None:
        raise StratumImportSpecError(f"Import-spec step is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from an import-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise StratumImportSpecError(
        f"Import-spec field '{field_name}' must be a string when provided."
    )


def reject_unknown_fields(
    args: Mapping[str, object],
    allowed_fields: set[str],
    command: str,
) -> None:
    """Fail when a step carries fields its command does not accept."""
    unknown_fields = sorted(set(args) - allowed_fields)
    if unknown_fields:
        raise StratumImportSpecError(
            f"Import-spec command '{command}' does not accept: {', '.join(unknown_fields)}."
        )
