"""
List command implementation.

Lists installed versions, newest first, marking the global default.
"""

import logging

from tgenv.versions.installer import list_installed
from tgenv.versions.version_file import VersionFile

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments with settings

    Returns:
        Exit code (1 when nothing is installed)
    """
    settings = args.settings
    installed = list_installed(settings)

    if not installed:
        logger.error("No versions available. Please install one with: tgenv install")
        return 1

    default_file = VersionFile(path=settings.default_version_file, is_default=True)
    default = default_file.read()

    for version in installed:
        if version == default:
            print(f"* {version} (set by {default_file.path})")
        else:
            print(f"  {version}")
    return 0
