"""Unit tests for CLI command handling."""

from __future__ import annotations

import pytest

from cli.main import main
from core import fs_cleanup
from tests.fake_tooling import write_root_tree
from tests.fixture_paths import fixture_path


@pytest.fixture(autouse=True)
def _isolated_lock(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRATUM_LOCK_FILE", str(tmp_path / "run" / "lock"))


def test_cli_import_directory_prints_destination(tmp_path, capsys) -> None:
    """CLI import should print the created stratum directory."""
    source = write_root_tree(tmp_path / "source")
    strata_root = tmp_path / "strata"

    exit_code = main(["--strata-root", str(strata_root), "import", "alpine", str(source)])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and output == str(strata_root.resolve() / "alpine")
    assert (strata_root / "alpine" / "etc" / "os-release").exists()


def test_cli_import_failure_reports_and_cleans_up(tmp_path, capsys) -> None:
    """A failed import should print the error, report cleanup, and exit 1."""
    source = tmp_path / "rootfs.zip"
    source.write_bytes(b"PK")
    strata_root = tmp_path / "strata"

    exit_code = main(["--strata-root", str(strata_root), "import", "alpine", str(source)])
    stderr_lines = capsys.readouterr().err.splitlines()

    assert exit_code == 1 and not (strata_root / "alpine").exists()
    assert any(line.startswith("ERROR: Unrecognized import source") for line in stderr_lines)
    assert "Cleaned up." in stderr_lines


def test_cli_import_rejects_taken_name(tmp_path, capsys) -> None:
    """Importing over an existing stratum should fail and keep it intact."""
    strata_root = tmp_path / "strata"
    (strata_root / "alpine").mkdir(parents=True)

    exit_code = main(["--strata-root", str(strata_root), "import", "alpine", str(tmp_path)])

    assert exit_code == 1 and (strata_root / "alpine").is_dir()
    assert "already exists" in capsys.readouterr().err


def test_cli_partitions_lists_candidates(
    tmp_path,
    monkeypatch: pytest.MonkeyPatch,
    capsys,
) -> None:
    """Partitions command should print one tab-separated row per candidate."""
    fdisk = tmp_path / "fdisk"
    fdisk.write_text(
        f"#!/bin/sh\ncat \"{fixture_path('fdisk/gpt_efi_linux.txt')}\"\n",
        encoding="utf-8",
    )
    fdisk.chmod(0o755)
    monkeypatch.setenv("STRATUM_FDISK", str(fdisk))

    exit_code = main(["partitions", str(tmp_path / "vm.img")])
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0 and output == ["2\tgpt\t2097152", "3\tgpt\t270532608"]


def test_cli_requires_subcommand() -> None:
    """Invoking without a subcommand should exit with a usage error."""
    with pytest.raises(SystemExit):
        main([])


def test_cli_reports_original_error_when_rollback_fails(
    tmp_path,
    monkeypatch: pytest.MonkeyPatch,
    capsys,
) -> None:
    """A stuck rollback should still print the stage error as one diagnostic line."""
    source = tmp_path / "rootfs.zip"
    source.write_bytes(b"PK")
    strata_root = tmp_path / "strata"
    monkeypatch.setattr(
        fs_cleanup,
        "mounts_below",
        lambda path, mountinfo_path=None: [path / "stratum-import" / "mnt"],
    )
    monkeypatch.setattr(fs_cleanup, "_release_mount", lambda mount_point, umount_binary: None)

    exit_code = main(["--strata-root", str(strata_root), "import", "alpine", str(source)])
    stderr_lines = capsys.readouterr().err.splitlines()

    assert exit_code == 1
    assert any(line.startswith("ERROR: Unrecognized import source") for line in stderr_lines)
    assert any(line.startswith("Rollback failed") for line in stderr_lines)
    assert "Cleaned up." not in stderr_lines
