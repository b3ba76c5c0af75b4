"""
Version resolution.

Turns zero or one user argument into exactly one concrete version by
consulting the remote listing.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from tgenv.config.settings import Settings
from tgenv.core.exceptions import NoMatchingVersionError, ResolutionError
from tgenv.core.remote import list_remote_versions
from tgenv.versions.min_required import min_required_version
from tgenv.versions.specifier import SpecifierKind, VersionSpecifier, first_match
from tgenv.versions.version_file import find_version_file

logger = logging.getLogger(__name__)


def requested_specifier(
    argument: Optional[str], settings: Settings, cwd: Optional[Path] = None
) -> str:
    """
    Determine the specifier string for an install request.

    An explicit argument wins. Without one, a project .terragrunt-version is
    used; the global default file does not count as a request.

    Returns:
        Specifier string, possibly empty
    """
    if argument:
        return argument.strip()

    version_file = find_version_file(settings, cwd)
    if version_file.is_default:
        logger.debug("Only the global default version file applies, ignoring it")
        return ""

    specifier = version_file.read()
    if specifier:
        logger.info(f"Version '{specifier}' requested by {version_file.path}")
    return specifier


class VersionResolver:
    """
    Resolves specifiers against the remote listing.

    The listing is fetched at most once per resolver and is assumed to be
    ordered newest first; it is never re-sorted.

    Example:
        >>> resolver = VersionResolver(Settings.from_env())
        >>> resolver.resolve("latest")
        '0.67.4'
    """

    def __init__(
        self,
        settings: Settings,
        list_versions: Callable[[Settings], List[str]] = list_remote_versions,
        cwd: Optional[Path] = None,
    ):
        self.settings = settings
        self._list_versions = list_versions
        self.cwd = cwd
        self._remote: Optional[List[str]] = None

    @property
    def remote_versions(self) -> List[str]:
        if self._remote is None:
            self._remote = self._list_versions(self.settings)
        return self._remote

    def resolve(self, argument: Optional[str] = None) -> str:
        """
        Resolve an install request to a concrete version.

        Args:
            argument: Specifier given on the command line, if any

        Returns:
            Concrete version string

        Raises:
            ResolutionError: If nothing was requested or nothing matches
            MinRequiredError: If min-required cannot be satisfied
            TransportError: If the listing cannot be fetched
        """
        raw = requested_specifier(argument, self.settings, self.cwd)
        if not raw:
            raise ResolutionError("Version is not specified")

        specifier = VersionSpecifier.parse(raw)

        if specifier.kind is SpecifierKind.MIN_REQUIRED:
            project_dir = self.cwd or Path.cwd()
            version = min_required_version(self.remote_versions, project_dir)
            specifier = VersionSpecifier.parse(version)

        return self.match(specifier, self.remote_versions)

    @staticmethod
    def match(
        specifier: VersionSpecifier, versions: List[str], where: str = "remote"
    ) -> str:
        """
        Pick the first listed version matching a specifier.

        Raises:
            ResolutionError: If the pattern is invalid or nothing matches
        """
        try:
            version = first_match(specifier.pattern, versions)
        except ValueError as e:
            raise ResolutionError(str(e)) from e

        if version is None:
            raise NoMatchingVersionError(specifier.raw, where)

        logger.debug(f"Resolved '{specifier.raw}' to {version}")
        return version


__all__ = ["VersionResolver", "requested_specifier"]
