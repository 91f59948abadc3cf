"""Unit tests for the stratum management lock."""

from __future__ import annotations

import portalocker
import pytest

from core.errors import StratumLockError
from core.stratum_lock import stratum_lock


def test_stratum_lock_creates_lock_file(tmp_path) -> None:
    """Acquiring the lock should create missing parent directories and file."""
    lock_file = tmp_path / "run" / "lock"

    with stratum_lock(lock_file):
        created = lock_file.exists()

    assert created


def test_stratum_lock_is_reacquirable_after_release(tmp_path) -> None:
    """The lock should be released when the block exits, even on error."""
    lock_file = tmp_path / "lock"

    with pytest.raises(RuntimeError):
        with stratum_lock(lock_file):
            raise RuntimeError("import failed")
    with stratum_lock(lock_file):
        reacquired = True

    assert reacquired


def test_stratum_lock_wraps_lock_failures(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """portalocker failures should surface as StratumLockError."""

    def _fail_lock(handle, flags) -> None:
        raise portalocker.exceptions.LockException("held elsewhere")

    monkeypatch.setattr(portalocker, "lock", _fail_lock)

    with pytest.raises(StratumLockError):
        with stratum_lock(tmp_path / "lock"):
            pass


def test_stratum_lock_raises_for_unwritable_location(tmp_path) -> None:
    """A lock path below a regular file should fail with StratumLockError."""
    blocker = tmp_path / "run"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(StratumLockError):
        with stratum_lock(blocker / "lock"):
            pass
