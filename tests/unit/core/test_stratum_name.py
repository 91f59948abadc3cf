"""Unit tests for stratum name validation."""

from __future__ import annotations

import pytest

from core.errors import StratumNameError
from core.stratum_name import validate_stratum_name


def test_validate_stratum_name_returns_destination(tmp_path) -> None:
    """A fresh legal name should map to a directory under the strata root."""
    destination = validate_stratum_name("debian-12.5", tmp_path)

    assert destination == tmp_path / "debian-12.5"


@pytest.mark.parametrize("name", ["", "-alpine", ".hidden", "a/b", "arch linux", "bedrock"])
def test_validate_stratum_name_rejects_illegal_names(tmp_path, name: str) -> None:
    """Illegal and reserved names should be rejected."""
    with pytest.raises(StratumNameError):
        validate_stratum_name(name, tmp_path)


def test_validate_stratum_name_rejects_existing_stratum(tmp_path) -> None:
    """An existing stratum directory should never be reused."""
    (tmp_path / "alpine").mkdir()

    with pytest.raises(StratumNameError):
        validate_stratum_name("alpine", tmp_path)


def test_validate_stratum_name_rejects_dangling_symlink(tmp_path) -> None:
    """A dangling symlink occupying the name should count as existing."""
    (tmp_path / "void").symlink_to(tmp_path / "missing")

    with pytest.raises(StratumNameError):
        validate_stratum_name("void", tmp_path)
