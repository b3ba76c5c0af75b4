"""
Install pipeline.

Chains the four stages of an install strictly forward:

1. Resolve the requested specifier to a concrete version
2. Fetch the artifact (and manifest) into a temporary download scope
3. Verify the manifest signature and the artifact checksum
4. Install the artifact into its version directory

Any stage failure raises; the download scope is removed on every exit path.
Verification degrades instead of failing when tooling is absent, but always
says so through a warning.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from tgenv.config.markers import SignatureConfig, resolve_signature_config
from tgenv.config.settings import Settings
from tgenv.core.download import DownloadProgress
from tgenv.core.filesystem import download_scope
from tgenv.core.locking import version_lock
from tgenv.core.platform import PlatformKey, detect_platform_key
from tgenv.core.verification import ChecksumVerifier, create_signature_verifier
from tgenv.versions.fetcher import ArtifactFetcher
from tgenv.versions.installer import Installer
from tgenv.versions.resolver import VersionResolver

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install request."""

    version: str
    """Resolved version"""

    path: Path
    """Path to the installed executable"""

    was_installed: bool
    """Whether the version was already present (nothing downloaded)"""

    duration: float = 0.0
    """Time spent downloading, verifying and installing in seconds"""


class InstallPipeline:
    """
    Installs one Terragrunt version per run.

    Collaborators default to the real implementations and can be replaced
    for testing. The platform key and signature mechanism are resolved once,
    when the pipeline is created.

    Example:
        >>> pipeline = InstallPipeline(Settings.from_env())
        >>> result = pipeline.run("latest")
        >>> print(f"Installed at: {result.path}")
    """

    def __init__(
        self,
        settings: Settings,
        platform_key: Optional[PlatformKey] = None,
        signature_config: Optional[SignatureConfig] = None,
        resolver: Optional[VersionResolver] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        installer: Optional[Installer] = None,
        checksum_verifier: Optional[ChecksumVerifier] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.settings = settings
        self.platform_key = platform_key or detect_platform_key(settings.arch)
        self.signature_config = signature_config or resolve_signature_config(settings)
        self.resolver = resolver or VersionResolver(settings)
        self.fetcher = fetcher or ArtifactFetcher(
            settings, self.platform_key, progress_callback=progress_callback
        )
        self.installer = installer or Installer(settings, self.platform_key)
        self.checksum_verifier = checksum_verifier or ChecksumVerifier()

        logger.debug(
            f"Pipeline for {self.platform_key} "
            f"(signature: {self.signature_config.mode.value})"
        )

    def run(self, argument: Optional[str] = None) -> InstallResult:
        """
        Resolve, download, verify and install.

        Args:
            argument: Version specifier from the command line, if any

        Returns:
            InstallResult

        Raises:
            ResolutionError: If no version can be resolved
            TransportError: If a download fails
            VerificationError: If a signature or checksum does not match
            InstallationError: If the version directory cannot be populated
        """
        version = self.resolver.resolve(argument)

        if self.installer.is_installed(version):
            logger.info(f"Terragrunt v{version} is already installed")
            return InstallResult(
                version=version,
                path=self.installer.binary_path(version),
                was_installed=True,
            )

        logger.info(f"Installing Terragrunt v{version}")
        start_time = time.time()

        with version_lock(self.settings.lock_dir, version):
            # Another process may have finished while we waited for the lock
            if self.installer.is_installed(version):
                logger.info(f"Terragrunt v{version} is already installed")
                return InstallResult(
                    version=version,
                    path=self.installer.binary_path(version),
                    was_installed=True,
                )

            with download_scope(self.settings.tmp_dir) as scope:
                path = self._install_from_scope(version, scope)

        duration = time.time() - start_time
        logger.debug(f"Installed terragrunt v{version} in {duration:.1f}s")
        return InstallResult(
            version=version, path=path, was_installed=False, duration=duration
        )

    def _install_from_scope(self, version: str, scope: Path) -> Path:
        artifact = self.fetcher.fetch_artifact(version, scope)

        manifest: Optional[Path] = None
        if self.settings.ignore_checksum:
            logger.warning(
                "TGENV_IGNORE_CHECKSUM is set, not downloading SHA256SUMS"
            )
        else:
            manifest = self.fetcher.fetch_manifest(version, scope)

        self._verify_signature(version, scope, manifest)
        self._verify_checksum(artifact, manifest, scope)

        return self.installer.install(artifact, version)

    def _verify_signature(
        self, version: str, scope: Path, manifest: Optional[Path]
    ) -> None:
        verifier = create_signature_verifier(self.signature_config, self.settings)
        if verifier is None:
            logger.warning(
                "No keybase install or signature verification tool configured, "
                "skipping PGP signature verification"
            )
            return

        if manifest is None:
            logger.warning(
                "SHA256SUMS was not downloaded, skipping PGP signature verification"
            )
            return

        skip_reason = verifier.preflight()
        if skip_reason:
            logger.warning(
                f"Skipping PGP signature verification with {verifier.name}: "
                f"{skip_reason}"
            )
            return

        signature = self.fetcher.fetch_signature(version, scope)
        verifier.verify(manifest, signature)

    def _verify_checksum(
        self, artifact: Path, manifest: Optional[Path], scope: Path
    ) -> None:
        if self.settings.ignore_checksum or manifest is None:
            logger.warning(
                "Checksum verification disabled by TGENV_IGNORE_CHECKSUM, "
                f"{artifact.name} is NOT verified"
            )
            return

        if not self.checksum_verifier.available:
            logger.warning(
                "No shasum or sha256sum tool available, skipping SHA256 hash "
                f"verification of {artifact.name}"
            )
            return

        self.checksum_verifier.verify(manifest, artifact.name, scope)


__all__ = ["InstallPipeline", "InstallResult"]
