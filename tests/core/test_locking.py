"""
Unit tests for per-version install locks.
"""

from unittest.mock import patch

import pytest
from filelock import Timeout

from tgenv.core.exceptions import InstallationError
from tgenv.core.locking import version_lock


class TestVersionLock:
    """Test version_lock()."""

    def test_acquire_and_release(self, tmp_path):
        lock_dir = tmp_path / "lock"

        with version_lock(lock_dir, "0.50.0"):
            assert (lock_dir / "version-0.50.0.lock").exists()

    def test_different_versions_do_not_block(self, tmp_path):
        with version_lock(tmp_path, "0.50.0"):
            with version_lock(tmp_path, "0.51.0", timeout=1):
                pass

    def test_timeout_becomes_installation_error(self, tmp_path):
        with patch(
            "tgenv.core.locking.FileLock.acquire",
            side_effect=Timeout(str(tmp_path / "version-1.0.0.lock")),
        ):
            with pytest.raises(InstallationError, match="Could not acquire install lock"):
                with version_lock(tmp_path, "1.0.0", timeout=0):
                    pass
