"""
Installed version management.

Each installed version is a directory <root>/versions/<version> holding the
terragrunt executable. The presence of that executable is what "installed"
means.
"""

import logging
import shutil
import stat
from pathlib import Path
from typing import List

from packaging.version import InvalidVersion, Version

from tgenv.config.settings import Settings
from tgenv.core.exceptions import InstallationError, NoMatchingVersionError
from tgenv.core.filesystem import FilesystemError, safe_rmtree
from tgenv.core.platform import PlatformKey

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


class Installer:
    """
    Materializes verified artifacts into version directories.

    Example:
        >>> installer = Installer(settings, platform_key)
        >>> installer.install(scope / "terragrunt_linux_amd64", "0.50.0")
        PosixPath('/home/user/.tgenv/versions/0.50.0/terragrunt')
    """

    def __init__(self, settings: Settings, platform_key: PlatformKey):
        self.settings = settings
        self.platform_key = platform_key

    def version_dir(self, version: str) -> Path:
        return self.settings.versions_dir / version

    def binary_path(self, version: str) -> Path:
        return self.version_dir(version) / self.platform_key.executable_name

    def is_installed(self, version: str) -> bool:
        return self.binary_path(version).is_file()

    def install(self, artifact: Path, version: str) -> Path:
        """
        Copy an artifact into its version directory and make it executable.

        Args:
            artifact: Verified binary inside the download scope
            version: Resolved version

        Returns:
            Path to the installed executable

        Raises:
            InstallationError: If mkdir, copy or chmod fails
        """
        destination_dir = self.version_dir(version)
        destination = self.binary_path(version)

        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallationError(
                f"Failed to create directory {destination_dir}: {e}"
            ) from e

        try:
            shutil.copyfile(artifact, destination)
        except OSError as e:
            raise InstallationError(
                f"Failed to copy {artifact.name} to {destination}: {e}"
            ) from e

        try:
            destination.chmod(EXECUTABLE_MODE)
        except OSError as e:
            raise InstallationError(
                f"Failed to make {destination} executable: {e}"
            ) from e

        logger.debug(f"Installed {artifact.name} as {destination}")
        return destination

    def uninstall(self, version: str) -> Path:
        """
        Remove an installed version.

        Raises:
            NoMatchingVersionError: If the version is not installed
            InstallationError: If the directory cannot be removed
        """
        version_dir = self.version_dir(version)
        if not version_dir.is_dir():
            raise NoMatchingVersionError(version, "local versions")

        try:
            safe_rmtree(version_dir, require_prefix=self.settings.versions_dir)
        except FilesystemError as e:
            raise InstallationError(str(e)) from e

        logger.debug(f"Removed {version_dir}")
        return version_dir


def _sort_key(version: str):
    try:
        return (1, Version(version))
    except InvalidVersion:
        return (0, Version("0"))


def list_installed(settings: Settings) -> List[str]:
    """
    List installed versions, newest first.

    Directories whose names are not valid versions sort last.
    """
    versions_dir = settings.versions_dir
    if not versions_dir.is_dir():
        return []

    installed = [entry.name for entry in versions_dir.iterdir() if entry.is_dir()]
    return sorted(installed, key=_sort_key, reverse=True)


def set_default_version(settings: Settings, version: str) -> Path:
    """
    Write the global default version file.

    Raises:
        InstallationError: If the file cannot be written
    """
    path = settings.default_version_file
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{version}\n", encoding="utf-8")
    except OSError as e:
        raise InstallationError(f"Failed to write {path}: {e}") from e
    return path


__all__ = ["Installer", "list_installed", "set_default_version"]
