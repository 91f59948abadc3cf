"""Structured import progress reporting.

This module emits progress events for long-running imports: image
conversion percentages and per-entry copy updates.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from core.constants import CONVERSION_PROGRESS_STEP_PERCENT
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass
class ImportProgressTracker:
    """Track and emit progress events for one import run."""

    stratum_name: str
    conversion_step_percent: float = CONVERSION_PROGRESS_STEP_PERCENT
    run_started_at: float = field(default_factory=time.monotonic)
    last_conversion_percent: float | None = None

    def log_conversion_progress(self, percent: float) -> None:
        """Log conversion progress at most once per configured step."""
        if not _should_log_conversion(
            percent, self.last_conversion_percent, self.conversion_step_percent
        ):
            return
        self.last_conversion_percent = percent
        _LOGGER.info(
            "image_conversion_progress",
            stratum_name=self.stratum_name,
            percent=round(percent, 2),
            elapsed_seconds=round(time.monotonic() - self.run_started_at, 3),
        )

    def log_entry_copied(self, entry_name: str, entry_index: int, total_entries: int) -> None:
        """Log one copied top-level entry."""
        _LOGGER.info(
            "entry_copied",
            stratum_name=self.stratum_name,
            entry=entry_name,
            entry_index=entry_index,
            total_entries=total_entries,
            copy_progress=round(_progress_fraction(entry_index, total_entries), 3),
        )


def _should_log_conversion(percent: float, last_percent: float | None, step: float) -> bool:
    """Return true for the first, final, and every step-crossing update."""
    if last_percent is None or percent >= 100.0:
        return last_percent != percent
    return percent - last_percent >= step


def _progress_fraction(index: int, total: int) -> float:
    """Compute bounded progress fraction."""
    if total <= 0:
        return 0.0
    return min(1.0, max(0.0, index / total))
