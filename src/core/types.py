"""Shared typed models.

This module defines immutable data models used by the classifier,
image, and ingest layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

SourceKind = Literal["directory", "tarball", "disk-image"]
PartitionTableFormat = Literal["mbr", "gpt"]
PipelineState = Literal[
    "initializing",
    "classifying",
    "materializing",
    "normalizing",
    "cleaning-up",
    "done",
    "aborting",
]


@dataclass(frozen=True)
class Source:
    """Classified import source.

    Attributes:
        path: Filesystem path of the source.
        kind: Ingestion strategy selected for the source.
    """

    path: Path
    kind: SourceKind


@dataclass(frozen=True)
class PartitionCandidate:
    """Partition start read from a partition table.

    Attributes:
        number: One-based partition number in on-disk order.
        start_sector: First sector of the partition.
        sector_size: Sector size declared by the table report.
        table_format: Table layout the row was read from.
    """

    number: int
    start_sector: int
    sector_size: int
    table_format: PartitionTableFormat

    @property
    def byte_offset(self) -> int:
        """Byte offset of the partition start within the raw image."""
        return self.start_sector * self.sector_size


@dataclass(frozen=True)
class MountProbeResult:
    """Outcome of one mount-inspect-unmount probe.

    Attributes:
        candidate: Probed partition candidate.
        mounted: Whether the partition could be mounted.
        is_linux_typed: Whether the partition passed the Linux type filter.
        has_os_release_marker: Whether etc/os-release was present.
    """

    candidate: PartitionCandidate
    mounted: bool
    is_linux_typed: bool
    has_os_release_marker: bool


@dataclass(frozen=True)
class ImportOptions:
    """Import command options.

    Attributes:
        stratum_name: Name of the stratum directory to create.
        source_path: Directory, tarball, or disk image to import.
        on_completed: Optional hook run with the finished destination.
    """

    stratum_name: str
    source_path: str
    on_completed: Callable[[Path], None] | None = None


@dataclass(frozen=True)
class ImportResult:
    """Import command output.

    Attributes:
        stratum_name: Imported stratum name.
        destination: Populated stratum directory.
        source_kind: Strategy used for the import.
        chosen_partition: Root partition for disk-image imports.
    """

    stratum_name: str
    destination: Path
    source_kind: SourceKind
    chosen_partition: PartitionCandidate | None = None
