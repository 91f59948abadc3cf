"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    return FIXTURES_ROOT / relative_path


def fdisk_report(name: str) -> str:
    """Read a canned ``fdisk -l`` report from tests/fixtures/fdisk."""
    return fixture_path(f"fdisk/{name}").read_text(encoding="utf-8")
