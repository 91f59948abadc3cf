"""Root partition selection for partitioned disk images.

Every candidate is mounted, inspected for ``etc/os-release``, and unmounted
before the next one is tried: loop mounts of one image at shifting offsets
must never overlap. The choice is a heuristic. A single mountable partition
wins outright; otherwise exactly one partition carrying the marker wins with
a warning; anything else is ambiguous.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable, Sequence

from core.constants import OS_RELEASE_MARKER
from core.errors import AmbiguousRootPartitionError, MountFailedError
from core.logging_config import get_logger
from core.types import MountProbeResult, PartitionCandidate
from tools.protocols import MountImage

_LOGGER = get_logger(__name__)


class RootPartitionSelector:
    """Probe partition candidates one at a time and choose the root."""

    def __init__(
        self,
        mounter: MountImage,
        retry_delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._mounter = mounter
        self._retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep

    def select(
        self,
        raw_image: Path,
        candidates: Iterable[PartitionCandidate],
        mount_point: Path,
    ) -> PartitionCandidate:
        """Probe every candidate and return the chosen root partition.

        Args:
            raw_image: Raw image holding the partitions.
            candidates: Partition candidates in on-disk order.
            mount_point: Empty scratch directory used for every probe.

        Returns:
            Chosen root partition candidate.

        Raises:
            MountFailedError: If no candidate could be mounted.
            AmbiguousRootPartitionError: If the marker heuristic is inconclusive.
        """
        results = self.probe_all(raw_image, candidates, mount_point)
        return choose_root_partition(results)

    def probe_all(
        self,
        raw_image: Path,
        candidates: Iterable[PartitionCandidate],
        mount_point: Path,
    ) -> list[MountProbeResult]:
        """Probe candidates sequentially and collect one result per candidate."""
        results: list[MountProbeResult] = []
        for candidate in candidates:
            results.append(self.probe(raw_image, candidate, mount_point))
        return results

    def probe(
        self,
        raw_image: Path,
        candidate: PartitionCandidate,
        mount_point: Path,
    ) -> MountProbeResult:
        """Mount one candidate, look for the marker file, and unmount it."""
        if not self._mount_with_retry(raw_image, candidate, mount_point):
            result = MountProbeResult(
                candidate=candidate,
                mounted=False,
                is_linux_typed=False,
                has_os_release_marker=False,
            )
        else:
            try:
                has_marker = has_os_release_marker(mount_point)
            finally:
                self._mounter.unmount(mount_point)
            result = MountProbeResult(
                candidate=candidate,
                mounted=True,
                is_linux_typed=True,
                has_os_release_marker=has_marker,
            )
        _LOGGER.info(
            "partition_probe_completed",
            partition=candidate.number,
            byte_offset=candidate.byte_offset,
            mounted=result.mounted,
            has_os_release_marker=result.has_os_release_marker,
        )
        return result

    def _mount_with_retry(
        self,
        raw_image: Path,
        candidate: PartitionCandidate,
        mount_point: Path,
    ) -> bool:
        """Mount a candidate, retrying once after a short backoff.

        Loop device churn can transiently report the device as in use.
        """
        try:
            self._mounter.mount(raw_image, candidate.byte_offset, mount_point)
            return True
        except MountFailedError as error:
            _LOGGER.debug(
                "partition_mount_retrying",
                partition=candidate.number,
                byte_offset=candidate.byte_offset,
                error=str(error),
            )
        self._sleep(self._retry_delay_seconds)
        try:
            self._mounter.mount(raw_image, candidate.byte_offset, mount_point)
            return True
        except MountFailedError as error:
            _LOGGER.info(
                "partition_not_mountable",
                partition=candidate.number,
                byte_offset=candidate.byte_offset,
                error=str(error),
            )
            return False


def has_os_release_marker(root: Path) -> bool:
    """Return whether ``root`` holds ``etc/os-release`` as a file or symlink.

    Absolute symlinks point into the host namespace, so a dangling link
    still counts.
    """
    marker = root / OS_RELEASE_MARKER
    return marker.is_symlink() or marker.exists()


def choose_root_partition(results: Sequence[MountProbeResult]) -> PartitionCandidate:
    """Apply the root selection rule to collected probe results.

    Args:
        results: One probe result per candidate.

    Returns:
        Chosen root partition candidate.

    Raises:
        MountFailedError: If no candidate was mountable.
        AmbiguousRootPartitionError: If zero or several mountable
            candidates carry the marker file.
    """
    mounted = [result for result in results if result.mounted and result.is_linux_typed]
    if len(mounted) == 1:
        return mounted[0].candidate
    if not mounted:
        raise MountFailedError(
            f"None of the {len(results)} Linux partition(s) could be mounted. "
            "Check that the image holds a Linux filesystem the kernel supports."
        )
    marked = [result for result in mounted if result.has_os_release_marker]
    if len(marked) == 1:
        chosen = marked[0].candidate
        _LOGGER.warning(
            "root_partition_guessed",
            partition=chosen.number,
            byte_offset=chosen.byte_offset,
            linux_partitions=len(mounted),
            message=(
                "Multiple Linux partitions found; guessed the one with etc/os-release. "
                "Retry with a single-partition image if the result is wrong."
            ),
        )
        return chosen
    raise AmbiguousRootPartitionError(
        f"Unable to choose a root partition: {len(mounted)} Linux partitions found "
        f"and {len(marked)} contain etc/os-release. "
        "Retry with an image containing a single Linux partition."
    )
