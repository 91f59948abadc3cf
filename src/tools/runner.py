"""Subprocess helpers for external tool invocation.

This module resolves executables and runs them with captured output,
translating failures into the caller's domain error type.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Sequence

from core.errors import MissingExternalToolError, StratumImportError


def require_tool(binary: str) -> str:
    """Resolve an executable on PATH.

    Args:
        binary: Executable name or path.

    Returns:
        Absolute executable path.

    Raises:
        MissingExternalToolError: If the executable cannot be found.
    """
    resolved = shutil.which(binary)
    if resolved is None:
        raise MissingExternalToolError(
            f"Required tool '{binary}' was not found on PATH. "
            "Install it or point the matching STRATUM_* variable at it."
        )
    return resolved


def run_tool(
    command: Sequence[str],
    error_type: type[StratumImportError],
    action: str,
) -> str:
    """Run a tool and return its standard output.

    Args:
        command: Full argument vector; the first item is resolved on PATH.
        error_type: Domain error raised on non-zero exit.
        action: Short description used in the error message.

    Returns:
        Captured standard output.

    Raises:
        MissingExternalToolError: If the executable cannot be found.
        StratumImportError: Of ``error_type`` when the tool fails.
    """
    executable = require_tool(command[0])
    try:
        completed = subprocess.run(
            [executable, *command[1:]],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as error:
        raise error_type(f"Failed to {action}: {error}.") from error
    if completed.returncode != 0:
        detail = completed.stderr.strip() or f"exit status {completed.returncode}"
        raise error_type(f"Failed to {action}: {detail}.")
    return completed.stdout
