"""Idempotent recursive removal of stratum directories.

A half-built stratum may still have a partition loop-mounted below it.
Removal unmounts everything below the target, deepest first, before
deleting files, so a mounted image is never emptied.
"""

from __future__ import annotations

import shutil
import subprocess
import time
from pathlib import Path

from core.constants import DEFAULT_UMOUNT_BINARY, MOUNTINFO_PATH, REMOVE_TREE_ATTEMPTS
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def remove_tree(
    path: Path,
    umount_binary: str = DEFAULT_UMOUNT_BINARY,
    mountinfo_path: Path = MOUNTINFO_PATH,
    retry_delay_seconds: float = 0.5,
) -> None:
    """Remove ``path`` recursively, tolerating partial state.

    A missing path is a no-op. Removal is retried a few times because
    lazily released loop devices can keep files busy briefly.

    Args:
        path: Directory or file to remove.
        umount_binary: Executable used to release leftover mounts.
        mountinfo_path: Kernel mount table to scan for leftover mounts.
        retry_delay_seconds: Delay between removal attempts.

    Raises:
        OSError: If the path still cannot be removed after all attempts.
    """
    if not path.exists() and not path.is_symlink():
        return
    for mount_point in mounts_below(path, mountinfo_path):
        _release_mount(mount_point, umount_binary)
    still_mounted = mounts_below(path, mountinfo_path)
    if still_mounted:
        raise OSError(f"Refusing to remove {path}: {still_mounted[0]} is still mounted.")
    for attempt in range(1, REMOVE_TREE_ATTEMPTS + 1):
        try:
            _remove_path(path)
            return
        except OSError as error:
            if not path.exists() and not path.is_symlink():
                return
            if attempt == REMOVE_TREE_ATTEMPTS:
                raise
            _LOGGER.debug("remove_tree_retrying", path=str(path), attempt=attempt, error=str(error))
            time.sleep(retry_delay_seconds)


def mounts_below(path: Path, mountinfo_path: Path = MOUNTINFO_PATH) -> list[Path]:
    """Return mount points at or below ``path``, deepest first."""
    try:
        mountinfo = mountinfo_path.read_text(encoding="utf-8")
    except OSError:
        return []
    root = path.resolve()
    mount_points: list[Path] = []
    for line in mountinfo.splitlines():
        fields = line.split()
        if len(fields) < 5:
            continue
        mount_point = Path(_unescape_mount_field(fields[4]))
        if mount_point == root or root in mount_point.parents:
            mount_points.append(mount_point)
    return sorted(mount_points, key=lambda mount: len(mount.parts), reverse=True)


def _unescape_mount_field(field: str) -> str:
    """Decode the octal escapes mountinfo uses for spaces and tabs."""
    return (
        field.replace("\\040", " ")
        .replace("\\011", "\t")
        .replace("\\012", "\n")
        .replace("\\134", "\\")
    )


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _release_mount(mount_point: Path, umount_binary: str) -> None:
    _LOGGER.warning("leftover_mount_released", mount_point=str(mount_point))
    try:
        subprocess.run([umount_binary, str(mount_point)], check=False, capture_output=True)
    except OSError as error:
        _LOGGER.error("leftover_mount_release_failed", mount_point=str(mount_point), error=str(error))
