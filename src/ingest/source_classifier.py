"""Import source classification.

Sources are classified by filesystem type and file name suffix only;
file contents are never inspected.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import DISK_IMAGE_SUFFIXES, TARBALL_SUFFIXES
from core.errors import UnrecognizedSourceError
from core.types import Source


def classify_source(source_path: Path) -> Source:
    """Select the ingestion strategy for ``source_path``.

    Args:
        source_path: Directory, tarball, or disk image path.

    Returns:
        Classified source.

    Raises:
        UnrecognizedSourceError: If the path is missing, or is not a
            directory and has no known tarball or image suffix.
    """
    if source_path.is_dir():
        return Source(path=source_path, kind="directory")
    if not source_path.exists():
        raise UnrecognizedSourceError(
            f"Import source {source_path} does not exist. "
            "Provide an existing directory, tarball, or disk image."
        )
    name = source_path.name.lower()
    if name.endswith(TARBALL_SUFFIXES):
        return Source(path=source_path, kind="tarball")
    if name.endswith(DISK_IMAGE_SUFFIXES):
        return Source(path=source_path, kind="disk-image")
    supported = ", ".join(TARBALL_SUFFIXES + DISK_IMAGE_SUFFIXES)
    raise UnrecognizedSourceError(
        f"Unrecognized import source {source_path}. "
        f"Provide a directory or a file ending in one of: {supported}."
    )
