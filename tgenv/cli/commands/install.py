"""
Install command implementation.

Installs one Terragrunt version: tgenv install [VERSION]
"""

import logging

from tgenv.core.exceptions import UsageError
from tgenv.versions.pipeline import InstallPipeline
from tgenv.cli.utils import progress_printer, safe_print

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments with:
            - version: List of positional arguments (zero or one)
            - settings: Runtime settings

    Returns:
        Exit code (0 for success or when already installed)

    Raises:
        UsageError: If more than one version is given
    """
    versions = list(args.version or [])
    if len(versions) > 1:
        raise UsageError("usage: tgenv install [<version>]")

    argument = versions[0] if versions else None
    logger.debug(f"Install requested: {argument!r}")

    pipeline = InstallPipeline(args.settings, progress_callback=progress_printer())
    result = pipeline.run(argument)

    if not result.was_installed:
        safe_print(f"✓ Installation of terragrunt v{result.version} successful.")
        print(
            "To make this your default version, run "
            f"'tgenv use {result.version}'"
        )
    return 0
