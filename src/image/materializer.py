"""Disk image materialization into a stratum directory.

This module converts a VM disk image to raw, selects its root partition,
mounts it, and copies the root filesystem into the destination tree.
Partial copies are left behind on failure; the pipeline rolls them back.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import RAW_IMAGE_FORMAT, WORKING_AREA_DIR_NAME
from core.errors import CopyFailedError
from core.import_context import ImportContext
from core.logging_config import get_logger
from core.types import PartitionCandidate
from image.partition_table import require_partition_candidates
from image.root_partition import RootPartitionSelector
from ingest.import_progress import ImportProgressTracker
from tools.protocols import CopyTree
from tools.tooling import ImportTooling

_LOGGER = get_logger(__name__)


class ImageMaterializer:
    """Extract the root filesystem of a disk image."""

    def __init__(
        self,
        tooling: ImportTooling,
        selector: RootPartitionSelector,
        progress: ImportProgressTracker,
    ) -> None:
        self._tooling = tooling
        self._selector = selector
        self._progress = progress

    def materialize(self, context: ImportContext) -> PartitionCandidate:
        """Populate ``context.destination`` from a disk-image source.

        Args:
            context: Import context with a classified disk-image source.

        Returns:
            Partition the tree was copied from.

        Raises:
            StratumImportError: If any conversion, selection, mount,
                or copy step fails.
        """
        if context.source is None:
            raise ValueError("Import context has no classified source.")
        context.working_area.mkdir(parents=True, exist_ok=True)
        context.mount_point.mkdir(exist_ok=True)
        self._convert(context, context.source.path)
        candidates = require_partition_candidates(self._tooling.inspector, context.raw_image)
        chosen = self._selector.select(context.raw_image, candidates, context.mount_point)
        context.chosen_partition = chosen
        self._tooling.mounter.mount(context.raw_image, chosen.byte_offset, context.mount_point)
        try:
            copy_mounted_tree(
                self._tooling.copier,
                context.mount_point,
                context.destination,
                self._progress,
            )
        finally:
            self._tooling.mounter.unmount(context.mount_point)
        _LOGGER.info(
            "image_materialized",
            stratum_name=context.stratum_name,
            partition=chosen.number,
            table_format=chosen.table_format,
            byte_offset=chosen.byte_offset,
        )
        return chosen

    def _convert(self, context: ImportContext, source_path: Path) -> None:
        _LOGGER.info(
            "image_conversion_started",
            stratum_name=context.stratum_name,
            source=str(source_path),
            raw_image=str(context.raw_image),
        )
        self._tooling.converter.convert(
            source_path,
            context.raw_image,
            RAW_IMAGE_FORMAT,
            on_progress=self._progress.log_conversion_progress,
        )


def copy_mounted_tree(
    copier: CopyTree,
    mount_root: Path,
    destination: Path,
    progress: ImportProgressTracker,
) -> int:
    """Copy every entry under ``mount_root`` into ``destination``.

    When the mount root resolves to the destination itself, the working
    area entry is skipped.

    Returns:
        Number of copied top-level entries.

    Raises:
        CopyFailedError: If the mount root cannot be listed or a copy fails.
    """
    try:
        entries = sorted(mount_root.iterdir(), key=lambda path: path.name)
    except OSError as error:
        raise CopyFailedError(f"Failed to list mounted tree at {mount_root}: {error}.") from error
    if mount_root.resolve() == destination.resolve():
        entries = [entry for entry in entries if entry.name != WORKING_AREA_DIR_NAME]
    for index, entry in enumerate(entries, 1):
        copier.copy_entry(entry, destination)
        progress.log_entry_copied(entry.name, index, len(entries))
    return len(entries)
