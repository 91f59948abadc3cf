"""Stratum import orchestration.

This module creates the destination and working area, dispatches the
source to its ingestion strategy, normalizes the tree, and guarantees
cleanup: the working area is always removed, and the whole destination
is removed when any stage fails.
"""

from __future__ import annotations

from pathlib import Path

from core.config import StratumConfig
from core.errors import CopyFailedError
from core.fs_cleanup import remove_tree
from core.import_context import ImportContext
from core.logging_config import get_logger
from core.types import ImportOptions, ImportResult, Source
from image.materializer import ImageMaterializer
from image.root_partition import RootPartitionSelector
from ingest.import_progress import ImportProgressTracker
from ingest.source_classifier import classify_source
from ingest.source_copy import copy_directory_source, extract_tarball_source
from ingest.tree_normalizer import normalize_tree
from tools.tooling import ImportTooling

_LOGGER = get_logger(__name__)


class IngestionPipeline:
    """Run one import from source to populated stratum directory."""

    def __init__(
        self,
        options: ImportOptions,
        destination: Path,
        config: StratumConfig,
        tooling: ImportTooling,
    ) -> None:
        self._options = options
        self._config = config
        self._tooling = tooling
        self._context = ImportContext(stratum_name=options.stratum_name, destination=destination)
        self._progress = ImportProgressTracker(stratum_name=options.stratum_name)

    @property
    def context(self) -> ImportContext:
        """Context of the current run."""
        return self._context

    def run(self) -> ImportResult:
        """Execute the import and return the populated destination.

        Raises:
            StratumImportError: If any stage fails; the destination has
                been removed by the time the error propagates.
        """
        self._create_directories()
        try:
            self._classify()
            self._materialize()
            self._normalize()
        except BaseException as error:
            self._abort(error)
            raise
        self._clean_up()
        result = ImportResult(
            stratum_name=self._context.stratum_name,
            destination=self._context.destination,
            source_kind=self._require_source().kind,
            chosen_partition=self._context.chosen_partition,
        )
        if self._options.on_completed is not None:
            self._options.on_completed(result.destination)
        _log_import_completion(result)
        return result

    def _create_directories(self) -> None:
        destination = self._context.destination
        try:
            destination.mkdir(parents=True)
        except OSError as error:
            raise CopyFailedError(
                f"Failed to create stratum directory {destination}: {error}."
            ) from error
        try:
            self._context.working_area.mkdir()
        except OSError as error:
            remove_tree(destination, self._config.tools.umount)
            raise CopyFailedError(
                f"Failed to create working area {self._context.working_area}: {error}."
            ) from error
        _LOGGER.info(
            "import_started",
            stratum_name=self._context.stratum_name,
            source=self._options.source_path,
            destination=str(destination),
        )

    def _classify(self) -> None:
        self._context.transition("classifying")
        self._context.source = classify_source(Path(self._options.source_path).expanduser())
        _LOGGER.info(
            "source_classified",
            stratum_name=self._context.stratum_name,
            source=str(self._context.source.path),
            kind=self._context.source.kind,
        )

    def _materialize(self) -> None:
        self._context.transition("materializing")
        source = self._require_source()
        destination = self._context.destination
        if source.kind == "directory":
            copy_directory_source(self._tooling.copier, source.path, destination, self._progress)
        elif source.kind == "tarball":
            extract_tarball_source(source.path, destination)
        else:
            self._build_materializer().materialize(self._context)

    def _require_source(self) -> Source:
        if self._context.source is None:
            raise ValueError("Source must be classified before materializing.")
        return self._context.source

    def _build_materializer(self) -> ImageMaterializer:
        selector = RootPartitionSelector(
            self._tooling.mounter,
            retry_delay_seconds=self._config.mount_retry_delay_seconds,
        )
        return ImageMaterializer(self._tooling, selector, self._progress)

    def _normalize(self) -> None:
        self._context.transition("normalizing")
        normalize_tree(self._context.destination, self._config.wrapper_dir_name)

    def _clean_up(self) -> None:
        self._context.transition("cleaning-up")
        remove_tree(self._context.working_area, self._config.tools.umount)
        self._context.transition("done")

    def _abort(self, error: BaseException) -> None:
        """Roll back the destination; the stage error always wins."""
        failed_state = self._context.state
        self._context.transition("aborting")
        try:
            remove_tree(self._context.destination, self._config.tools.umount)
        except OSError as cleanup_error:
            _LOGGER.error(
                "import_rollback_failed",
                stratum_name=self._context.stratum_name,
                destination=str(self._context.destination),
                error=str(cleanup_error),
            )
            error.add_note(
                f"Rollback failed: {cleanup_error}. Remove {self._context.destination} manually."
            )
            return
        _LOGGER.error(
            "import_rolled_back",
            stratum_name=self._context.stratum_name,
            failed_state=failed_state,
            error_type=type(error).__name__,
            error=str(error),
        )


def import_stratum(
    options: ImportOptions,
    destination: Path,
    config: StratumConfig,
    tooling: ImportTooling,
) -> ImportResult:
    """Import a source into a new stratum directory.

    Args:
        options: Import request options.
        destination: Stratum directory to create; must not exist.
        config: Runtime configuration.
        tooling: External tool capabilities.

    Returns:
        Import result describing the populated stratum.

    Raises:
        StratumImportError: If ingestion fails. No destination is left behind.
    """
    return IngestionPipeline(options, destination, config, tooling).run()


def _log_import_completion(result: ImportResult) -> None:
    """Log pipeline completion with contextual metadata."""
    chosen = result.chosen_partition
    _LOGGER.info(
        "import_completed",
        stratum_name=result.stratum_name,
        destination=str(result.destination),
        source_kind=result.source_kind,
        partition=chosen.number if chosen else None,
        byte_offset=chosen.byte_offset if chosen else None,
    )
