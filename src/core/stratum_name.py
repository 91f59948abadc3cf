"""Stratum name validation."""

from __future__ import annotations

import re
from pathlib import Path

from core.constants import RESERVED_STRATUM_NAMES, STRATUM_NAME_PATTERN
from core.errors import StratumNameError

_NAME_PATTERN = re.compile(STRATUM_NAME_PATTERN)


def validate_stratum_name(stratum_name: str, strata_root: Path) -> Path:
    """Check a stratum name and return its destination directory.

    Args:
        stratum_name: Requested stratum name.
        strata_root: Directory holding all strata.

    Returns:
        Destination path for the new stratum.

    Raises:
        StratumNameError: If the name is illegal, reserved, or already used.
    """
    if not _NAME_PATTERN.fullmatch(stratum_name):
        raise StratumNameError(
            f"Invalid stratum name '{stratum_name}'. "
            "Use letters, digits, '_', '-' and '.', not starting with '-' or '.'."
        )
    if stratum_name in RESERVED_STRATUM_NAMES:
        raise StratumNameError(f"Stratum name '{stratum_name}' is reserved. Pick another name.")
    destination = strata_root / stratum_name
    if destination.exists() or destination.is_symlink():
        raise StratumNameError(
            f"Stratum '{stratum_name}' already exists at {destination}. "
            "Remove it or pick another name."
        )
    return destination
