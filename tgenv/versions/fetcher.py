"""
Release artifact retrieval.

Every release lives under <remote>/v<version>/ and contains one binary per
platform plus a SHA256SUMS manifest and its detached signature.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from tgenv.config.settings import Settings
from tgenv.core.download import DownloadProgress, download_file
from tgenv.core.exceptions import TransportError
from tgenv.core.platform import PlatformKey

logger = logging.getLogger(__name__)

MANIFEST_NAME = "SHA256SUMS"
SIGNATURE_NAME = "SHA256SUMS.sig"


class ArtifactFetcher:
    """
    Downloads the files of one release into a download scope.

    Example:
        >>> fetcher = ArtifactFetcher(settings, detect_platform_key("amd64"))
        >>> with download_scope(settings.tmp_dir) as scope:
        ...     binary = fetcher.fetch_artifact("0.50.0", scope)
    """

    def __init__(
        self,
        settings: Settings,
        platform_key: PlatformKey,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.settings = settings
        self.platform_key = platform_key
        self.progress_callback = progress_callback

    def release_url(self, version: str, filename: str) -> str:
        """
        URL of a file in a release.

        Example:
            >>> fetcher.release_url("0.50.0", "SHA256SUMS")
            'https://github.com/gruntwork-io/terragrunt/releases/download/v0.50.0/SHA256SUMS'
        """
        return f"{self.settings.remote}/v{version}/{filename}"

    def _fetch(
        self,
        version: str,
        filename: str,
        scope: Path,
        label: str,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        url = self.release_url(version, filename)
        try:
            return download_file(
                url,
                scope / filename,
                progress_callback=progress_callback,
                timeout=self.settings.http_timeout,
            )
        except TransportError as e:
            raise TransportError(f"{label} download failed: {e}") from e

    def fetch_artifact(self, version: str, scope: Path) -> Path:
        """
        Download the platform binary.

        Raises:
            TransportError: "Tarball download failed"
        """
        name = self.platform_key.artifact_name
        logger.info(f"Downloading release tarball from {self.release_url(version, name)}")
        return self._fetch(
            version, name, scope, "Tarball", progress_callback=self.progress_callback
        )

    def fetch_manifest(self, version: str, scope: Path) -> Path:
        """
        Download SHA256SUMS.

        Raises:
            TransportError: "SHA256SUMS download failed"
        """
        logger.info("Downloading SHA hash file")
        return self._fetch(version, MANIFEST_NAME, scope, MANIFEST_NAME)

    def fetch_signature(self, version: str, scope: Path) -> Path:
        """
        Download SHA256SUMS.sig.

        Raises:
            TransportError: "SHA256SUMS.sig download failed"
        """
        logger.info("Downloading SHA hash signature")
        return self._fetch(version, SIGNATURE_NAME, scope, SIGNATURE_NAME)


__all__ = ["ArtifactFetcher", "MANIFEST_NAME", "SIGNATURE_NAME"]
