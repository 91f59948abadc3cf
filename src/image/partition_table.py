"""Partition table report parsing.

This module turns busybox-style ``fdisk -l`` reports into partition
candidates without a partitioning library. Legacy MBR reports keep only
rows typed ``Linux``; GPT reports drop every entry starting at or before
sector 2048, where the boot stub partition conventionally lives.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

from core.constants import GPT_BOOT_STUB_MAX_SECTOR, MBR_BOOT_MARKER, MBR_LINUX_TYPE
from core.errors import NoPartitionsFoundError
from core.logging_config import get_logger
from core.types import PartitionCandidate, PartitionTableFormat
from tools.protocols import ReadPartitionTable

_LOGGER = get_logger(__name__)

_GPT_MARKER = "Found valid GPT"
_MBR_UNITS_PATTERN = re.compile(r"^Units: sectors of \d+ \* \d+ = (\d+) bytes", re.MULTILINE)
_MBR_DISK_PATTERN = re.compile(r"^Disk (\S+?):\s", re.MULTILINE)
_MBR_START_HEADER = "StartLBA"
_GPT_SECTOR_SIZE_PATTERN = re.compile(r"^Logical sector size: (\d+)", re.MULTILINE)
_GPT_ROW_PATTERN = re.compile(r"^\s*(\d+)\s+(\d+)\s+(\d+)\b")


def detect_table_format(report: str) -> PartitionTableFormat | None:
    """Return the table layout a report describes, or None if unknown."""
    if _GPT_MARKER in report:
        return "gpt"
    if _MBR_UNITS_PATTERN.search(report):
        return "mbr"
    return None


def iter_partition_candidates(report: str) -> Iterator[PartitionCandidate]:
    """Yield Linux partition candidates from an ``fdisk -l`` report.

    Args:
        report: Textual partition table report.

    Returns:
        Candidates in on-disk partition order.
    """
    table_format = detect_table_format(report)
    if table_format == "gpt":
        yield from _iter_gpt_candidates(report)
    elif table_format == "mbr":
        yield from _iter_mbr_candidates(report)


def read_partition_candidates(
    inspector: ReadPartitionTable,
    raw_image: Path,
) -> Iterator[PartitionCandidate]:
    """Inspect ``raw_image`` and lazily yield its partition candidates.

    Each call re-reads the table; the returned iterator is single-pass.
    """
    report = inspector.read_report(raw_image)
    _LOGGER.debug(
        "partition_table_read",
        raw_image=str(raw_image),
        table_format=detect_table_format(report),
    )
    yield from iter_partition_candidates(report)


def require_partition_candidates(
    inspector: ReadPartitionTable,
    raw_image: Path,
) -> list[PartitionCandidate]:
    """Read all candidates of ``raw_image``.

    Raises:
        NoPartitionsFoundError: If the table yields no candidates.
    """
    candidates = list(read_partition_candidates(inspector, raw_image))
    if not candidates:
        raise NoPartitionsFoundError(
            f"No Linux partitions found in {raw_image}. "
            "The image must contain a partition table with a Linux root partition."
        )
    _LOGGER.info(
        "partition_candidates_found",
        raw_image=str(raw_image),
        candidate_count=len(candidates),
        offsets=[candidate.byte_offset for candidate in candidates],
    )
    return candidates


def _iter_mbr_candidates(report: str) -> Iterator[PartitionCandidate]:
    sector_size = _read_sector_size(_MBR_UNITS_PATTERN, report)
    if sector_size is None:
        return
    for number, fields in enumerate(_mbr_rows(report), 1):
        if fields[-1] != MBR_LINUX_TYPE:
            continue
        start_sector = _mbr_start_sector(fields)
        if start_sector is None:
            continue
        yield PartitionCandidate(
            number=number,
            start_sector=start_sector,
            sector_size=sector_size,
            table_format="mbr",
        )


def _mbr_rows(report: str) -> Iterator[list[str]]:
    """Yield whitespace-split partition rows following the ``Device`` header.

    Only a busybox header carrying ``StartLBA`` opens the table; other
    column layouts yield nothing. Rows must name a device derived from the
    disk, so diagnostic lines between rows are not counted as partitions.
    """
    disk_match = _MBR_DISK_PATTERN.search(report)
    disk_name = disk_match.group(1) if disk_match else None
    in_table = False
    for line in report.splitlines():
        fields = line.split()
        if not fields:
            continue
        if fields[0] == "Device":
            in_table = _MBR_START_HEADER in fields
            continue
        if not in_table or len(fields) < 5:
            continue
        if disk_name is not None and not fields[0].startswith(disk_name):
            continue
        yield fields


def _mbr_start_sector(fields: list[str]) -> int | None:
    """Pick the StartLBA column.

    A bootable row carries an extra ``*`` column after the device name,
    shifting StartLBA from the 4th to the 5th field.
    """
    column = 4 if fields[1] == MBR_BOOT_MARKER else 3
    if column >= len(fields) or not fields[column].isdigit():
        return None
    return int(fields[column])


def _iter_gpt_candidates(report: str) -> Iterator[PartitionCandidate]:
    sector_size = _read_sector_size(_GPT_SECTOR_SIZE_PATTERN, report)
    if sector_size is None:
        return
    for line in report.splitlines():
        match = _GPT_ROW_PATTERN.match(line)
        if match is None:
            continue
        start_sector = int(match.group(2))
        if start_sector <= GPT_BOOT_STUB_MAX_SECTOR:
            continue
        yield PartitionCandidate(
            number=int(match.group(1)),
            start_sector=start_sector,
            sector_size=sector_size,
            table_format="gpt",
        )


def _read_sector_size(pattern: re.Pattern[str], report: str) -> int | None:
    match = pattern.search(report)
    if match is None:
        return None
    return int(match.group(1))
