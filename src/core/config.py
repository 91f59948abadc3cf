"""Runtime configuration model for stratum import.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CP_BINARY,
    DEFAULT_FDISK_BINARY,
    DEFAULT_LOCK_FILE,
    DEFAULT_MOUNT_BINARY,
    DEFAULT_MOUNT_RETRY_DELAY_SECONDS,
    DEFAULT_QEMU_IMG_BINARY,
    DEFAULT_STRATA_ROOT,
    DEFAULT_UMOUNT_BINARY,
    DEFAULT_WRAPPER_DIR_NAME,
)
from core.errors import StratumConfigError


@dataclass(frozen=True)
class ToolBinaries:
    """External tool executables used by the image pipeline.

    Attributes:
        qemu_img: Disk image format converter.
        fdisk: Partition table inspector.
        mount: Loop mount executable.
        umount: Unmount executable.
        cp: Attribute-preserving copy executable.
    """

    qemu_img: str = DEFAULT_QEMU_IMG_BINARY
    fdisk: str = DEFAULT_FDISK_BINARY
    mount: str = DEFAULT_MOUNT_BINARY
    umount: str = DEFAULT_UMOUNT_BINARY
    cp: str = DEFAULT_CP_BINARY


@dataclass(frozen=True)
class StratumConfig:
    """Validated runtime configuration.

    Attributes:
        strata_root: Directory under which new strata are created.
        lock_file: Lock file serializing stratum management operations.
        tools: External tool executables.
        mount_retry_delay_seconds: Backoff before retrying a failed mount.
        wrapper_dir_name: Single-character wrapper directory to collapse.
    """

    strata_root: Path
    lock_file: Path
    tools: ToolBinaries
    mount_retry_delay_seconds: float
    wrapper_dir_name: str

    @classmethod
    def from_env(cls) -> "StratumConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StratumConfigError: If environment values are invalid.
        """
        strata_root_value = os.getenv("STRATUM_STRATA_ROOT", str(DEFAULT_STRATA_ROOT))
        lock_file_value = os.getenv("STRATUM_LOCK_FILE", str(DEFAULT_LOCK_FILE))
        tools = ToolBinaries(
            qemu_img=os.getenv("STRATUM_QEMU_IMG", DEFAULT_QEMU_IMG_BINARY),
            fdisk=os.getenv("STRATUM_FDISK", DEFAULT_FDISK_BINARY),
            mount=os.getenv("STRATUM_MOUNT", DEFAULT_MOUNT_BINARY),
            umount=os.getenv("STRATUM_UMOUNT", DEFAULT_UMOUNT_BINARY),
            cp=os.getenv("STRATUM_CP", DEFAULT_CP_BINARY),
        )
        retry_delay = _parse_retry_delay(
            os.getenv("STRATUM_MOUNT_RETRY_DELAY", str(DEFAULT_MOUNT_RETRY_DELAY_SECONDS))
        )
        wrapper_dir_name = _parse_wrapper_dir_name(
            os.getenv("STRATUM_WRAPPER_DIR", DEFAULT_WRAPPER_DIR_NAME)
        )
        return cls(
            strata_root=Path(strata_root_value).expanduser().resolve(),
            lock_file=Path(lock_file_value).expanduser().resolve(),
            tools=tools,
            mount_retry_delay_seconds=retry_delay,
            wrapper_dir_name=wrapper_dir_name,
        )


def _parse_retry_delay(raw_value: str) -> float:
    """Parse the mount retry delay environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative delay in seconds.

    Raises:
        StratumConfigError: If value is not a non-negative number.
    """
    try:
        delay = float(raw_value)
    except ValueError as error:
        raise StratumConfigError(
            "Invalid STRATUM_MOUNT_RETRY_DELAY value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set STRATUM_MOUNT_RETRY_DELAY to a numeric value."
        ) from error
    if delay < 0:
        raise StratumConfigError(
            f"Invalid STRATUM_MOUNT_RETRY_DELAY value {delay}: must be zero or greater."
        )
    return delay


def _parse_wrapper_dir_name(raw_value: str) -> str:
    """Validate the wrapper directory name environment value."""
    if len(raw_value) != 1 or raw_value in ("/", "."):
        raise StratumConfigError(
            f"Invalid STRATUM_WRAPPER_DIR value '{raw_value}': "
            "expected exactly one character other than '/' or '.'."
        )
    return raw_value
