"""Unit tests for run-spec CLI execution."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from core.types import ImportOptions, ImportResult, PartitionCandidate
from ingest.import_sdk import StratumImportClient
from tests.fixture_paths import fixture_path


def test_cli_run_spec_executes_import_and_partitions_steps(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run-spec command should route each step to SDK operations."""
    captured: dict[str, object] = {}

    def _fake_import(self: StratumImportClient, options: ImportOptions) -> ImportResult:
        captured["strata_root"] = str(self.config.strata_root)
        captured["name"] = options.stratum_name
        captured["source"] = options.source_path
        return ImportResult(
            stratum_name=options.stratum_name,
            destination=self.config.strata_root / options.stratum_name,
            source_kind="tarball",
        )

    def _fake_partitions(self: StratumImportClient, raw_image: str) -> list[PartitionCandidate]:
        captured["image"] = raw_image
        return [PartitionCandidate(number=3, start_sector=4096, sector_size=512, table_format="gpt")]

    monkeypatch.setattr(StratumImportClient, "import_stratum", _fake_import)
    monkeypatch.setattr(StratumImportClient, "list_partitions", _fake_partitions)
    exit_code = main(["run-spec", str(fixture_path("import_spec/valid_batch.yaml"))])
    output = capsys.readouterr().out.strip().splitlines()

    assert (
        exit_code == 0
        and output == [str(Path("/tmp/stratum-import-spec-root").resolve() / "alpine"), "3\tgpt\t2097152"]
        and captured
        == {
            "strata_root": str(Path("/tmp/stratum-import-spec-root").resolve()),
            "name": "alpine",
            "source": "/srv/images/alpine.tar.gz",
            "image": "/srv/images/debian.img",
        }
    )


def test_cli_run_spec_missing_source_fails(capsys: pytest.CaptureFixture[str]) -> None:
    """Run-spec should fail when an import step has no source."""
    exit_code = main(["run-spec", str(fixture_path("import_spec/missing_source.yaml"))])

    assert exit_code == 1 and "missing required field 'source'" in capsys.readouterr().err


def test_cli_run_spec_rejects_unknown_step_fields(
    tmp_path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run-spec should reject step fields the command does not accept."""
    spec_file = tmp_path / "spec.yaml"
    spec_file.write_text(
        "version: 1\nsteps:\n  - command: partitions\n    image: vm.img\n    offset: 2048\n",
        encoding="utf-8",
    )

    exit_code = main(["run-spec", str(spec_file)])

    assert exit_code == 1 and "does not accept: offset" in capsys.readouterr().err
