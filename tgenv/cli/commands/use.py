"""
Use command implementation.

Makes an installed version the global default: tgenv use VERSION
"""

import logging
from pathlib import Path

from tgenv.versions.installer import list_installed, set_default_version
from tgenv.versions.min_required import min_required_version
from tgenv.versions.resolver import VersionResolver
from tgenv.versions.specifier import SpecifierKind, VersionSpecifier

logger = logging.getLogger(__name__)


def resolve_installed(specifier_text: str, settings) -> str:
    """
    Resolve a specifier against installed versions, newest first.

    Raises:
        ResolutionError: If no installed version matches
        MinRequiredError: If min-required cannot be satisfied
    """
    installed = list_installed(settings)
    specifier = VersionSpecifier.parse(specifier_text)

    if specifier.kind is SpecifierKind.MIN_REQUIRED:
        version = min_required_version(installed, Path.cwd())
        specifier = VersionSpecifier.parse(version)

    return VersionResolver.match(specifier, installed, where="local versions")


def run(args) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments with:
            - version: Specifier to resolve against installed versions
            - settings: Runtime settings

    Returns:
        Exit code (0 for success)
    """
    settings = args.settings
    version = resolve_installed(args.version, settings)

    path = set_default_version(settings, version)
    logger.debug(f"Wrote {path}")
    print(f"Switching default version to v{version}")
    return 0
