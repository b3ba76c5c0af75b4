"""
Core functionality for tgenv.

This package contains the foundational modules the install pipeline is built
from: transport, verification, platform detection and filesystem helpers.
"""

from .exceptions import (
    TgenvError,
    UsageError,
    ResolutionError,
    NoMatchingVersionError,
    MinRequiredError,
    TransportError,
    VerificationError,
    InstallationError,
)

from .platform import (
    PlatformKey,
    detect_platform_key,
    clear_platform_cache,
)

from .download import (
    DownloadProgress,
    download_file,
    fetch,
    format_progress,
)

from .filesystem import (
    FilesystemError,
    download_scope,
    safe_rmtree,
)

from .locking import version_lock

__all__ = [
    "TgenvError",
    "UsageError",
    "ResolutionError",
    "NoMatchingVersionError",
    "MinRequiredError",
    "TransportError",
    "VerificationError",
    "InstallationError",
    "PlatformKey",
    "detect_platform_key",
    "clear_platform_cache",
    "DownloadProgress",
    "download_file",
    "fetch",
    "format_progress",
    "FilesystemError",
    "download_scope",
    "safe_rmtree",
    "version_lock",
]
