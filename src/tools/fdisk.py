"""fdisk backed partition table inspection."""

from __future__ import annotations

from pathlib import Path

from core.errors import NoPartitionsFoundError
from tools.runner import run_tool


class FdiskTableInspector:
    """Read partition table reports with ``fdisk -l``."""

    def __init__(self, binary: str) -> None:
        self._binary = binary

    def read_report(self, image: Path) -> str:
        """Return the textual ``fdisk -l`` report for ``image``."""
        return run_tool(
            [self._binary, "-l", str(image)],
            NoPartitionsFoundError,
            f"read the partition table of {image}",
        )
