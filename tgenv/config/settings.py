"""
Process-wide settings for tgenv.

All environment-derived configuration is read exactly once, at process
start, into an immutable Settings instance. Components receive the instance
explicitly instead of reading os.environ themselves.

Environment variables:
    TGENV_ROOT             Installation root (default: ~/.tgenv)
    TGENV_ARCH             Target CPU architecture (default: amd64)
    TGENV_IGNORE_CHECKSUM  Skip SHA256SUMS download and checksum verification
    TGENV_DEBUG            Enable debug logging
    TGENV_REMOTE           Base URL of the release downloads
    TGENV_LIST_URL         URL of the published versions listing
    TGENV_HTTP_TIMEOUT     HTTP timeout in seconds (default: 30)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_ARCH = "amd64"
DEFAULT_REMOTE = "https://github.com/gruntwork-io/terragrunt/releases/download"
DEFAULT_LIST_URL = (
    "https://api.github.com/repos/gruntwork-io/terragrunt/tags?per_page=100"
)
DEFAULT_HTTP_TIMEOUT = 30

_TRUTHY = {"1", "true", "yes", "on"}


def _is_truthy(value: Optional[str]) -> bool:
    """Interpret an environment variable value as a boolean flag."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def get_default_root() -> Path:
    """
    Get the default installation root.

    Returns:
        ~/.tgenv on every platform
    """
    return Path.home() / ".tgenv"


@dataclass(frozen=True)
class Settings:
    """
    Immutable runtime configuration.

    Attributes:
        root: Installation root holding versions/, tmp/, lock/ and marker files
        arch: Target CPU architecture used to build the platform key
        ignore_checksum: Skip manifest download and checksum verification
        debug: Debug tracing requested through the environment
        remote: Base URL of the release downloads
        list_url: URL returning the published versions
        http_timeout: Timeout applied to every HTTP request
    """

    root: Path = field(default_factory=get_default_root)
    arch: str = DEFAULT_ARCH
    ignore_checksum: bool = False
    debug: bool = False
    remote: str = DEFAULT_REMOTE
    list_url: str = DEFAULT_LIST_URL
    http_timeout: int = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            Settings instance

        Raises:
            ValueError: If TGENV_HTTP_TIMEOUT is not an integer

        Example:
            >>> settings = Settings.from_env({"TGENV_ARCH": "arm64"})
            >>> settings.arch
            'arm64'
        """
        if environ is None:
            environ = os.environ

        root_value = environ.get("TGENV_ROOT")
        root = Path(root_value).expanduser() if root_value else get_default_root()

        timeout_value = environ.get("TGENV_HTTP_TIMEOUT")
        try:
            http_timeout = (
                int(timeout_value) if timeout_value else DEFAULT_HTTP_TIMEOUT
            )
        except ValueError:
            raise ValueError(
                f"TGENV_HTTP_TIMEOUT must be an integer, got: {timeout_value}"
            )

        settings = cls(
            root=root,
            arch=environ.get("TGENV_ARCH") or DEFAULT_ARCH,
            ignore_checksum=_is_truthy(environ.get("TGENV_IGNORE_CHECKSUM")),
            debug=_is_truthy(environ.get("TGENV_DEBUG")),
            remote=(environ.get("TGENV_REMOTE") or DEFAULT_REMOTE).rstrip("/"),
            list_url=environ.get("TGENV_LIST_URL") or DEFAULT_LIST_URL,
            http_timeout=http_timeout,
        )
        logger.debug(f"Loaded settings: {settings}")
        return settings

    @property
    def versions_dir(self) -> Path:
        """Directory containing one subdirectory per installed version."""
        return self.root / "versions"

    @property
    def tmp_dir(self) -> Path:
        """Parent of the per-run temporary download scopes."""
        return self.root / "tmp"

    @property
    def lock_dir(self) -> Path:
        return self.root / "lock"

    @property
    def default_version_file(self) -> Path:
        """Global default version file, written by 'tgenv use'."""
        return self.root / "version"

    @property
    def keyring_path(self) -> Path:
        """Public keyring shipped with tgenv, used in gpgv trust mode."""
        return self.root / "share" / "gruntwork-keys.pgp"


__all__ = [
    "Settings",
    "get_default_root",
    "DEFAULT_ARCH",
    "DEFAULT_REMOTE",
    "DEFAULT_LIST_URL",
    "DEFAULT_HTTP_TIMEOUT",
]
