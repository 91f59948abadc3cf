"""Capability protocols for external tools.

The image pipeline depends on these contracts instead of concrete binaries,
so any tool or native library honoring the same byte and text contract
can be substituted, including in-process fakes for tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

ProgressCallback = Callable[[float], None]


class ConvertImage(Protocol):
    """Convert a disk image into another on-disk format."""

    def convert(
        self,
        source: Path,
        output: Path,
        output_format: str,
        on_progress: ProgressCallback | None = None,
    ) -> None: ...


class ReadPartitionTable(Protocol):
    """Produce a textual partition table report for an image."""

    def read_report(self, image: Path) -> str: ...


class MountImage(Protocol):
    """Loop-mount a filesystem at a byte offset inside an image."""

    def mount(self, image: Path, offset: int, mount_point: Path) -> None: ...

    def unmount(self, mount_point: Path) -> None: ...


class CopyTree(Protocol):
    """Copy one filesystem entry into a directory, preserving attributes."""

    def copy_entry(self, source: Path, destination_dir: Path) -> None: ...
