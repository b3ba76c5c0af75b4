"""
Per-version install locks.

Two tgenv processes installing the same version would otherwise race on the
version directory. A file lock under <root>/lock serializes them; installs of
different versions do not block each other.
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from tgenv.core.exceptions import InstallationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300


@contextmanager
def version_lock(lock_dir: Path, version: str, timeout: int = DEFAULT_TIMEOUT):
    """
    Acquire the install lock for a version.

    Args:
        lock_dir: Directory for lock files (created if missing)
        version: Resolved version string
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Yields:
        None

    Raises:
        InstallationError: If lock can't be acquired within timeout

    Example:
        >>> with version_lock(settings.lock_dir, "0.50.0"):
        ...     install()
    """
    lock_dir = Path(lock_dir)
    lock_dir.mkdir(parents=True, exist_ok=True)

    safe_version = version.replace("/", "-").replace("\\", "-").replace(":", "-")
    lock_path = lock_dir / f"version-{safe_version}.lock"
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired version lock: {lock_path}")
            yield
            logger.debug(f"Released version lock: {lock_path}")
    except LockTimeout as e:
        raise InstallationError(
            f"Could not acquire install lock for {version} after {timeout}s. "
            "Another tgenv process may be installing this version."
        ) from e


__all__ = ["version_lock", "LockTimeout"]
