"""
Filesystem helpers for tgenv.

Provides the temporary download scope used by the install pipeline and a
guarded recursive delete.
"""

import logging
import shutil
import signal
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)


class FilesystemError(Exception):
    """Base exception for filesystem operation errors."""

    pass


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent directory.

    Args:
        path: Path to check
        parent: Potential parent directory

    Returns:
        True if path is under parent, False otherwise
    """
    try:
        path.resolve().relative_to(parent.resolve())
        return True
    except ValueError:
        return False


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('~/.tgenv/versions/0.50.0', require_prefix='~/.tgenv')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove {path}: {e}") from e


def _raise_on_sigterm(signum, frame):
    raise SystemExit(128 + signum)


@contextmanager
def download_scope(
    parent: Path, prefix: str = "tgenv_download_"
) -> Iterator[Path]:
    """
    Scratch directory for one install attempt, removed on every exit path.

    The directory is created with tempfile.mkdtemp under parent. While the
    scope is open SIGTERM is turned into SystemExit, so termination by signal
    unwinds through the same cleanup as a normal return or an exception.

    Args:
        parent: Directory to create the scope in (created if missing)
        prefix: Prefix for the directory name

    Yields:
        Path to the scratch directory

    Example:
        >>> with download_scope(settings.tmp_dir) as scope:
        ...     download_file(url, scope / "SHA256SUMS")
    """
    parent = Path(parent)
    parent.mkdir(parents=True, exist_ok=True)
    scope = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    logger.debug(f"Created download scope: {scope}")

    previous_handler = None
    in_main_thread = threading.current_thread() is threading.main_thread()
    if in_main_thread:
        previous_handler = signal.signal(signal.SIGTERM, _raise_on_sigterm)

    try:
        yield scope
    finally:
        if in_main_thread:
            signal.signal(signal.SIGTERM, previous_handler or signal.SIG_DFL)
        try:
            safe_rmtree(scope)
            logger.debug(f"Removed download scope: {scope}")
        except FilesystemError as e:
            logger.warning(f"Could not remove temporary directory {scope}: {e}")


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "safe_rmtree",
    "download_scope",
]
