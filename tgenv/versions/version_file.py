"""
Version file lookup.

A project pins its Terragrunt version in a .terragrunt-version file. The
lookup walks from the working directory up to the filesystem root; when no
project file exists the global default <root>/version is used.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tgenv.config.settings import Settings

logger = logging.getLogger(__name__)

VERSION_FILE_NAME = ".terragrunt-version"


@dataclass(frozen=True)
class VersionFile:
    """
    Result of a version file lookup.

    Attributes:
        path: The file selected
        is_default: True when path is the global default file
    """

    path: Path
    is_default: bool

    def read(self) -> str:
        """
        Read the requested version.

        Blank lines and '#' comments are ignored; the first remaining line
        is the version. A missing file reads as an empty string.
        """
        if not self.path.is_file():
            return ""
        for line in self.path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                return line
        return ""


def find_version_file(settings: Settings, start: Optional[Path] = None) -> VersionFile:
    """
    Locate the version file governing a directory.

    Args:
        settings: Runtime settings (global default location)
        start: Directory to start from (default: current directory)

    Returns:
        VersionFile for the nearest .terragrunt-version, or the global default
    """
    directory = (start or Path.cwd()).resolve()

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / VERSION_FILE_NAME
        if candidate.is_file():
            logger.debug(f"Found version file: {candidate}")
            return VersionFile(path=candidate, is_default=False)

    logger.debug(f"No {VERSION_FILE_NAME} found, using {settings.default_version_file}")
    return VersionFile(path=settings.default_version_file, is_default=True)


__all__ = ["VersionFile", "find_version_file", "VERSION_FILE_NAME"]
