"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import StratumConfig
from core.errors import StratumConfigError


def test_from_env_reads_strata_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve the strata root from environment."""
    monkeypatch.setenv("STRATUM_STRATA_ROOT", "./.tmp-strata")

    config = StratumConfig.from_env()

    assert config.strata_root.name == ".tmp-strata" and config.strata_root.is_absolute()


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to the documented defaults."""
    for name in ("STRATUM_STRATA_ROOT", "STRATUM_WRAPPER_DIR", "STRATUM_QEMU_IMG"):
        monkeypatch.delenv(name, raising=False)

    config = StratumConfig.from_env()

    assert (str(config.strata_root), config.wrapper_dir_name, config.tools.qemu_img) == (
        "/bedrock/strata",
        "0",
        "qemu-img",
    )


def test_from_env_reads_tool_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should honor per-tool executable overrides."""
    monkeypatch.setenv("STRATUM_FDISK", "/opt/busybox/fdisk")

    config = StratumConfig.from_env()

    assert config.tools.fdisk == "/opt/busybox/fdisk"


def test_from_env_raises_for_invalid_retry_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a non-numeric mount retry delay."""
    monkeypatch.setenv("STRATUM_MOUNT_RETRY_DELAY", "soon")

    with pytest.raises(StratumConfigError):
        StratumConfig.from_env()


def test_from_env_raises_for_negative_retry_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject a negative mount retry delay."""
    monkeypatch.setenv("STRATUM_MOUNT_RETRY_DELAY", "-1")

    with pytest.raises(StratumConfigError):
        StratumConfig.from_env()


@pytest.mark.parametrize("wrapper", ["", "ab", "/", "."])
def test_from_env_raises_for_invalid_wrapper_dir(
    monkeypatch: pytest.MonkeyPatch,
    wrapper: str,
) -> None:
    """Config should require a single usable wrapper directory character."""
    monkeypatch.setenv("STRATUM_WRAPPER_DIR", wrapper)

    with pytest.raises(StratumConfigError):
        StratumConfig.from_env()
