"""Core constants used across stratum import modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_STRATA_ROOT = Path("/bedrock/strata")
DEFAULT_LOCK_FILE = Path("/bedrock/run/lock")
DEFAULT_QEMU_IMG_BINARY = "qemu-img"
DEFAULT_FDISK_BINARY = "fdisk"
DEFAULT_MOUNT_BINARY = "mount"
DEFAULT_UMOUNT_BINARY = "umount"
DEFAULT_CP_BINARY = "cp"
DEFAULT_MOUNT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_WRAPPER_DIR_NAME = "0"
WORKING_AREA_DIR_NAME = "stratum-import"
RAW_IMAGE_FILE_NAME = "img"
MOUNT_POINT_DIR_NAME = "mnt"
RAW_IMAGE_FORMAT = "raw"
OS_RELEASE_MARKER = Path("etc") / "os-release"
RESERVED_STRATUM_NAMES = ("bedrock", ".", "..")
STRATUM_NAME_PATTERN = r"[A-Za-z0-9_][A-Za-z0-9_.-]*"
TARBALL_SUFFIXES = (
    ".tar",
    ".tar.gz",
    ".tgz",
    ".tar.bz2",
    ".tbz",
    ".tbz2",
    ".tar.xz",
    ".txz",
)
DISK_IMAGE_SUFFIXES = (".qcow", ".qcow2", ".qcow3", ".vdi", ".vmdk")
GPT_BOOT_STUB_MAX_SECTOR = 2048
MBR_LINUX_TYPE = "Linux"
MBR_BOOT_MARKER = "*"
CONVERSION_PROGRESS_STEP_PERCENT = 10.0
REMOVE_TREE_ATTEMPTS = 3
MOUNTINFO_PATH = Path("/proc/self/mountinfo")
IMPORT_SPEC_VERSION = 1
