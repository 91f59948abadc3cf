"""Python SDK for stratum import operations.

This module exposes high-level APIs for importing strata, listing the
partition candidates of raw images, and running YAML import specs.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import StratumConfig
from core.import_spec_execution import execute_import_spec_file
from core.stratum_lock import stratum_lock
from core.stratum_name import validate_stratum_name
from core.types import ImportOptions, ImportResult, PartitionCandidate
from image.partition_table import read_partition_candidates
from ingest.pipeline import import_stratum
from tools.tooling import ImportTooling, build_default_tooling


class StratumImportClient:
    """Primary SDK entry point for stratum imports."""

    def __init__(
        self,
        config: StratumConfig | None = None,
        tooling: ImportTooling | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            tooling: Optional external tool capabilities; defaults to the
                subprocess-backed tools named in ``config``.
        """
        self._config = config or StratumConfig.from_env()
        self._tooling = tooling or build_default_tooling(self._config)

    @property
    def config(self) -> StratumConfig:
        """Runtime configuration used by this client."""
        return self._config

    def import_stratum(self, options: ImportOptions) -> ImportResult:
        """Import a source into a new stratum under the strata root.

        The name is validated and the management lock held for the whole
        run.

        Args:
            options: Import options.

        Returns:
            Import result for the populated stratum.

        Raises:
            StratumNameError: If the stratum name is illegal or taken.
            StratumLockError: If the management lock cannot be acquired.
            StratumImportError: If ingestion fails.
        """
        with stratum_lock(self._config.lock_file):
            destination = validate_stratum_name(options.stratum_name, self._config.strata_root)
            return import_stratum(options, destination, self._config, self._tooling)

    def list_partitions(self, raw_image: str) -> list[PartitionCandidate]:
        """Read the Linux partition candidates of a raw image.

        Args:
            raw_image: Path to a raw disk image.

        Returns:
            Candidates in on-disk order; empty if none were found.
        """
        image_path = Path(raw_image).expanduser()
        return list(read_partition_candidates(self._tooling.inspector, image_path))

    def with_strata_root(self, strata_root: str) -> "StratumImportClient":
        """Clone the client with a different strata root.

        Args:
            strata_root: New strata root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(strata_root).expanduser().resolve()
        updated_config = replace(self._config, strata_root=resolved_root)
        return StratumImportClient(updated_config, self._tooling)

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML import spec through the shared execution engine.

        Args:
            spec_file: Path to YAML import spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_import_spec_file(self, spec_file)
