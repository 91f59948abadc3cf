"""Mutable per-run import context.

The pipeline owns one context per import and threads it through every
stage, so no stage reads the current destination from ambient state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.constants import MOUNT_POINT_DIR_NAME, RAW_IMAGE_FILE_NAME, WORKING_AREA_DIR_NAME
from core.logging_config import get_logger
from core.types import PartitionCandidate, PipelineState, Source

_LOGGER = get_logger(__name__)


@dataclass
class ImportContext:
    """State of one import run.

    Attributes:
        stratum_name: Name of the stratum being created.
        destination: Stratum directory being populated.
        state: Current pipeline state.
        source: Classified source, once known.
        chosen_partition: Selected root partition for disk-image sources.
    """

    stratum_name: str
    destination: Path
    state: PipelineState = "initializing"
    source: Source | None = None
    chosen_partition: PartitionCandidate | None = None

    @property
    def working_area(self) -> Path:
        """Scratch directory inside the destination."""
        return self.destination / WORKING_AREA_DIR_NAME

    @property
    def raw_image(self) -> Path:
        """Raw image converted from a disk-image source."""
        return self.working_area / RAW_IMAGE_FILE_NAME

    @property
    def mount_point(self) -> Path:
        """Scratch mount point shared by every partition mount."""
        return self.working_area / MOUNT_POINT_DIR_NAME

    def transition(self, state: PipelineState) -> None:
        """Move to ``state`` and log the transition."""
        _LOGGER.debug(
            "import_state_changed",
            stratum_name=self.stratum_name,
            previous_state=self.state,
            state=state,
        )
        self.state = state
