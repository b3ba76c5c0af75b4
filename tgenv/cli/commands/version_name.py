"""
Version-name command implementation.

Prints the installed version selected by the nearest version file.
"""

import logging

from tgenv.core.exceptions import ResolutionError
from tgenv.versions.version_file import find_version_file
from tgenv.cli.commands.use import resolve_installed

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the version-name command.

    Args:
        args: Parsed command-line arguments with settings

    Returns:
        Exit code (0 for success)

    Raises:
        ResolutionError: If no version is set or it is not installed
    """
    version_file = find_version_file(args.settings)
    requested = version_file.read()
    if not requested:
        raise ResolutionError(
            f"Version could not be resolved (set by {version_file.path} "
            "or tgenv use <version>)"
        )

    logger.debug(f"Version '{requested}' requested by {version_file.path}")
    print(resolve_installed(requested, args.settings))
    return 0
