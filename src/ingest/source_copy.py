"""Directory and tarball ingestion strategies.

Both strategies populate an existing destination directory. Failures are
raised as CopyFailedError and leave partial content for the pipeline to
roll back.
"""

from __future__ import annotations

import os
import posixpath
import tarfile
from pathlib import Path

from core.errors import CopyFailedError
from core.logging_config import get_logger
from ingest.import_progress import ImportProgressTracker
from tools.protocols import CopyTree

_LOGGER = get_logger(__name__)


def copy_directory_source(
    copier: CopyTree,
    source_dir: Path,
    destination: Path,
    progress: ImportProgressTracker,
) -> int:
    """Copy every entry of ``source_dir`` into ``destination``.

    Args:
        copier: Attribute-preserving copy capability.
        source_dir: Source directory.
        destination: Stratum directory.
        progress: Progress tracker for per-entry events.

    Returns:
        Number of copied top-level entries.

    Raises:
        CopyFailedError: If listing or copying fails.
    """
    try:
        entries = sorted(source_dir.iterdir(), key=lambda path: path.name)
    except OSError as error:
        raise CopyFailedError(
            f"Failed to list source directory {source_dir}: {error}. Check permissions."
        ) from error
    for index, entry in enumerate(entries, 1):
        copier.copy_entry(entry, destination)
        progress.log_entry_copied(entry.name, index, len(entries))
    return len(entries)


def extract_tarball_source(tarball: Path, destination: Path) -> int:
    """Extract ``tarball`` into ``destination``.

    Compression is detected by tarfile. Members keep their modes, device
    nodes, and absolute symlink targets. Like ``tar xf``, leading ``/`` is
    stripped from member names and hard-link targets, and members that
    would land outside the destination are refused.

    Returns:
        Number of extracted members.

    Raises:
        CopyFailedError: If the archive cannot be read or extracted, or a
            member escapes the destination.
    """
    try:
        with tarfile.open(tarball, "r:*") as archive:
            members = archive.getmembers()
            archive.extractall(destination, members=members, filter=_rootfs_member_filter)
    except (OSError, tarfile.TarError) as error:
        raise CopyFailedError(
            f"Failed to extract tarball {tarball}: {error}. "
            "Check that the archive is complete and readable."
        ) from error
    _LOGGER.info(
        "tarball_extracted",
        tarball=str(tarball),
        destination=str(destination),
        member_count=len(members),
    )
    return len(members)


def _rootfs_member_filter(member: tarfile.TarInfo, destination: str) -> tarfile.TarInfo:
    """Anchor a member below ``destination`` without other sanitizing."""
    changes: dict[str, str] = {"name": _contained_name(member.name, destination)}
    if member.islnk():
        changes["linkname"] = _contained_name(member.linkname, destination)
    return tarfile.fully_trusted_filter(member.replace(**changes, deep=False), destination)


def _contained_name(name: str, destination: str) -> str:
    """Strip leading ``/`` and refuse names resolving outside ``destination``.

    Parent directories are resolved against what is already extracted, so a
    symlinked directory cannot redirect later members.
    """
    relative = name.lstrip("/")
    normalized = posixpath.normpath(relative) if relative else "."
    root = os.path.realpath(destination)
    parent = os.path.realpath(os.path.join(root, posixpath.dirname(normalized)))
    escapes = normalized == ".." or normalized.startswith("../")
    if escapes or os.path.commonpath([root, parent]) != root:
        raise CopyFailedError(
            f"Refusing to extract tarball member '{name}': it resolves outside {destination}."
        )
    return normalized
