"""
Platform detection for tgenv.

Terragrunt publishes one binary per OS family and CPU architecture, named
terragrunt_<os>_<arch> (with a .exe suffix on Windows). This module maps the
host to that naming scheme.

Usage:
    from tgenv.core.platform import detect_platform_key

    key = detect_platform_key(arch="amd64")
    print(key.artifact_name)   # terragrunt_linux_amd64
"""

import functools
import logging
import platform
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformKey:
    """
    Host platform as it appears in release artifact names.

    Attributes:
        os: OS family ('darwin', 'linux', 'windows')
        arch: CPU architecture as published ('amd64', 'arm64', '386', ...)
    """

    os: str
    arch: str

    def __str__(self) -> str:
        """
        Canonical platform key.

        Example:
            >>> str(PlatformKey("linux", "amd64"))
            'linux_amd64'
        """
        return f"{self.os}_{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def artifact_name(self) -> str:
        """
        File name of the release artifact for this platform.

        Example:
            >>> PlatformKey("windows", "amd64").artifact_name
            'terragrunt_windows_amd64.exe'
        """
        suffix = ".exe" if self.is_windows else ""
        return f"terragrunt_{self}{suffix}"

    @property
    def executable_name(self) -> str:
        """Name the binary is installed under inside a version directory."""
        return "terragrunt.exe" if self.is_windows else "terragrunt"


def detect_platform_key(arch: str) -> PlatformKey:
    """
    Detect the host OS family and combine it with the requested architecture.

    Args:
        arch: Target architecture (TGENV_ARCH, default 'amd64')

    Returns:
        PlatformKey for this run
    """
    return PlatformKey(os=_detect_os(), arch=arch)


@functools.lru_cache(maxsize=1)
def _detect_os() -> str:
    """
    Detect operating system family.

    Returns:
        'windows', 'darwin' or 'linux'; unknown systems fall back to 'linux'
    """
    system = platform.system().lower()

    if system == "windows" or system.startswith(("mingw", "msys", "cygwin")):
        return "windows"
    elif system == "darwin":
        return "darwin"
    elif system == "linux":
        return "linux"
    else:
        logger.debug(f"Unknown OS '{system}', assuming linux")
        return "linux"


def clear_platform_cache():
    """
    Clear the OS detection cache.

    Useful for testing when platform.system() is patched.
    """
    _detect_os.cache_clear()


__all__ = [
    "PlatformKey",
    "detect_platform_key",
    "clear_platform_cache",
]
