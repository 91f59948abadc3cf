"""Exclusive lock serializing stratum management operations.

Uses portalocker so concurrent imports never race on the same strata
namespace.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import portalocker

from core.errors import StratumLockError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@contextmanager
def stratum_lock(lock_file: Path) -> Iterator[None]:
    """Hold the stratum management lock for the duration of the block.

    Blocks until any other holder releases the lock.

    Args:
        lock_file: Lock file path; created if missing.

    Yields:
        None while the lock is held.

    Raises:
        StratumLockError: If the lock file cannot be opened or locked.
    """
    try:
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        handle = open(lock_file, "a", encoding="utf-8")
    except OSError as error:
        raise StratumLockError(
            f"Failed to open stratum lock {lock_file}: {error}. "
            "Check that the lock directory is writable."
        ) from error
    with handle:
        try:
            portalocker.lock(handle, portalocker.LOCK_EX)
        except portalocker.exceptions.BaseLockException as error:
            raise StratumLockError(
                f"Failed to acquire stratum lock {lock_file}: {error}. "
                "Wait for the running operation to finish and retry."
            ) from error
        _LOGGER.debug("stratum_lock_acquired", lock_file=str(lock_file))
        try:
            yield
        finally:
            portalocker.unlock(handle)
            _LOGGER.debug("stratum_lock_released", lock_file=str(lock_file))
