"""Default external tool bundle.

This module assembles the concrete tool implementations selected by
runtime configuration into one object the pipeline receives.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import StratumConfig
from tools.cp_copy import CpTreeCopier
from tools.fdisk import FdiskTableInspector
from tools.loop_mount import LoopMounter
from tools.protocols import ConvertImage, CopyTree, MountImage, ReadPartitionTable
from tools.qemu_img import QemuImgConverter


@dataclass(frozen=True)
class ImportTooling:
    """External capabilities required by an import run.

    Attributes:
        converter: Disk image format converter.
        inspector: Partition table inspector.
        mounter: Loop mount primitive.
        copier: Attribute-preserving tree copier.
    """

    converter: ConvertImage
    inspector: ReadPartitionTable
    mounter: MountImage
    copier: CopyTree


def build_default_tooling(config: StratumConfig) -> ImportTooling:
    """Build subprocess-backed tooling from configured binaries.

    Args:
        config: Runtime configuration.

    Returns:
        Tool bundle for the import pipeline.
    """
    tools = config.tools
    return ImportTooling(
        converter=QemuImgConverter(tools.qemu_img),
        inspector=FdiskTableInspector(tools.fdisk),
        mounter=LoopMounter(tools.mount, tools.umount),
        copier=CpTreeCopier(tools.cp),
    )
