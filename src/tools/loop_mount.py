"""Loop mount and unmount through the system mount tools.

The image is mounted at a byte offset with ``-o loop,offset=N``. The mount
is not forced read-only: filesystems with a dirty journal refuse a
read-only loop device, so read-only use is a convention of the callers.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import MountFailedError
from tools.runner import run_tool


class LoopMounter:
    """Mount image partitions with ``mount`` and release them with ``umount``."""

    def __init__(self, mount_binary: str, umount_binary: str) -> None:
        self._mount_binary = mount_binary
        self._umount_binary = umount_binary

    def mount(self, image: Path, offset: int, mount_point: Path) -> None:
        """Mount the filesystem starting at ``offset`` bytes onto ``mount_point``.

        Raises:
            MountFailedError: If the mount call fails.
        """
        run_tool(
            [
                self._mount_binary,
                "-o",
                f"loop,offset={offset}",
                str(image),
                str(mount_point),
            ],
            MountFailedError,
            f"mount {image} at offset {offset} on {mount_point}",
        )

    def unmount(self, mount_point: Path) -> None:
        """Unmount ``mount_point``.

        Raises:
            MountFailedError: If the unmount call fails.
        """
        run_tool(
            [self._umount_binary, str(mount_point)],
            MountFailedError,
            f"unmount {mount_point}",
        )
