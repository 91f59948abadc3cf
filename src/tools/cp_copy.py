"""Attribute-preserving copies with ``cp -a``.

Root filesystems carry ownership, setuid bits, device nodes, and absolute
symlinks, which ``cp -a`` reproduces as-is.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import CopyFailedError
from tools.runner import run_tool


class CpTreeCopier:
    """Copy filesystem entries with ``cp -a``."""

    def __init__(self, binary: str) -> None:
        self._binary = binary

    def copy_entry(self, source: Path, destination_dir: Path) -> None:
        """Copy ``source`` recursively into ``destination_dir``.

        Raises:
            CopyFailedError: If cp exits non-zero.
        """
        run_tool(
            [self._binary, "-a", "--", str(source), f"{destination_dir}/"],
            CopyFailedError,
            f"copy {source} into {destination_dir}",
        )
