"""
Terragrunt version management.

Resolution of version specifiers, retrieval of release artifacts, and the
installed version directories.
"""

from .specifier import SpecifierKind, VersionSpecifier
from .version_file import VersionFile, find_version_file
from .resolver import VersionResolver, requested_specifier
from .fetcher import ArtifactFetcher
from .installer import Installer, list_installed, set_default_version
from .pipeline import InstallPipeline, InstallResult

__all__ = [
    "SpecifierKind",
    "VersionSpecifier",
    "VersionFile",
    "find_version_file",
    "VersionResolver",
    "requested_specifier",
    "ArtifactFetcher",
    "Installer",
    "list_installed",
    "set_default_version",
    "InstallPipeline",
    "InstallResult",
]
