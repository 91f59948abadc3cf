"""Pytest configuration for repository test runs."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    src_path = Path(__file__).resolve().parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clean_stratum_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host STRATUM_* settings from leaking into tests."""
    for name in list(os.environ):
        if name.startswith("STRATUM_"):
            monkeypatch.delenv(name)
