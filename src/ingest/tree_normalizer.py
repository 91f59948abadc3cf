"""Stratum tree normalization.

Some VM exports and tarballs wrap the whole root filesystem in one extra
directory. This module collapses at most one such layer and never changes
file content.
"""

from __future__ import annotations

import uuid
from pathlib import Path

from core.constants import WORKING_AREA_DIR_NAME
from core.errors import CopyFailedError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def normalize_tree(destination: Path, wrapper_dir_name: str) -> Path | None:
    """Collapse one superfluous wrapping directory in ``destination``.

    The named single-character wrapper is tried first, if it holds at least
    one entry. Otherwise a lone top-level directory is collapsed. The
    working area entry is ignored while counting top-level entries.

    Args:
        destination: Populated stratum directory.
        wrapper_dir_name: Single-character wrapper directory name.

    Returns:
        The wrapper that was collapsed, or None if the tree was untouched.

    Raises:
        CopyFailedError: If hoisting entries fails.
    """
    wrapper = _find_wrapper(destination, wrapper_dir_name)
    if wrapper is None:
        return None
    _hoist_contents(wrapper, destination)
    _LOGGER.info("tree_wrapper_collapsed", destination=str(destination), wrapper=wrapper.name)
    return wrapper


def _find_wrapper(destination: Path, wrapper_dir_name: str) -> Path | None:
    named_wrapper = destination / wrapper_dir_name
    if _is_real_dir(named_wrapper) and any(named_wrapper.iterdir()):
        return named_wrapper
    entries = [
        entry for entry in destination.iterdir() if entry.name != WORKING_AREA_DIR_NAME
    ]
    if len(entries) == 1 and _is_real_dir(entries[0]):
        return entries[0]
    return None


def _hoist_contents(wrapper: Path, destination: Path) -> None:
    """Move every entry of ``wrapper`` into ``destination`` and drop it.

    The wrapper is renamed first so a child sharing its name can land.
    """
    staging = destination / f".{wrapper.name}.{uuid.uuid4().hex}"
    try:
        wrapper.rename(staging)
        for entry in sorted(staging.iterdir(), key=lambda path: path.name):
            target = destination / entry.name
            if target.exists() or target.is_symlink():
                raise FileExistsError(f"{target} already exists")
            entry.rename(target)
        staging.rmdir()
    except OSError as error:
        raise CopyFailedError(
            f"Failed to collapse wrapper directory {wrapper}: {error}."
        ) from error


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()
