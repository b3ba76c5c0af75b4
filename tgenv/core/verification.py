"""
Integrity verification of downloaded releases.

Two independent layers:

- Signature verification of SHA256SUMS against SHA256SUMS.sig, using one of
  keybase, GnuPG or gpgv. Each mechanism wraps an external command and maps
  its exit status onto VerificationError.
- Checksum verification of the artifact against its SHA256SUMS entry, using
  shasum or sha256sum.

No cryptography is done here: the external tools are trusted black boxes
whose exit code 0 means success.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from tgenv.config.markers import SignatureConfig, SignatureMode
from tgenv.config.settings import Settings
from tgenv.core.exceptions import VerificationError

logger = logging.getLogger(__name__)

PUBLISHER = "gruntwork"
COMMAND_TIMEOUT = 120


def _run(
    cmd: List[str], cwd: Optional[Path] = None, input: Optional[str] = None
) -> subprocess.CompletedProcess:
    """
    Run an external verification command.

    Raises:
        VerificationError: If the command is not installed or times out
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            input=input,
            capture_output=True,
            text=True,
            timeout=COMMAND_TIMEOUT,
        )
    except FileNotFoundError as e:
        raise VerificationError(f"{cmd[0]} not installed: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise VerificationError(f"{cmd[0]} timed out after {COMMAND_TIMEOUT}s") from e


# ============================================================================
# Signature Verification
# ============================================================================


class SignatureVerifier(ABC):
    """A mechanism able to check SHA256SUMS.sig against SHA256SUMS."""

    name = "signature"

    def preflight(self) -> Optional[str]:
        """
        Check whether the mechanism can run at all.

        Returns:
            None when usable, otherwise the reason verification is skipped
        """
        return None

    @abstractmethod
    def verify(self, manifest: Path, signature: Path) -> None:
        """
        Verify the detached signature over the manifest.

        Raises:
            VerificationError: If the signature is rejected
        """


class KeybaseVerifier(SignatureVerifier):
    """Verifies with 'keybase pgp verify' against the publisher's identity."""

    name = "keybase"

    def __init__(self, binary: str = "keybase", publisher: str = PUBLISHER):
        self.binary = binary
        self.publisher = publisher

    def preflight(self) -> Optional[str]:
        try:
            status = _run([self.binary, "status"])
        except VerificationError as e:
            return str(e)
        logged_in = any(
            line.split(":", 1)[0].strip() == "Logged in"
            and line.split(":", 1)[1].strip().lower() == "yes"
            for line in status.stdout.splitlines()
            if ":" in line
        )
        if status.returncode != 0 or not logged_in:
            return "keybase is not logged in"

        try:
            following = _run([self.binary, "list-following"])
        except VerificationError as e:
            return str(e)
        if following.returncode != 0 or self.publisher not in following.stdout.split():
            return f"keybase user does not follow {self.publisher}"

        return None

    def verify(self, manifest: Path, signature: Path) -> None:
        result = _run(
            [
                self.binary,
                "pgp",
                "verify",
                "-S",
                self.publisher,
                "-d",
                str(signature),
                "-i",
                str(manifest),
            ]
        )
        if result.returncode != 0:
            raise VerificationError(
                f"PGP signature does not match: {result.stderr.strip()}"
            )
        logger.info("PGP signature verified with keybase")


class GnupgVerifier(SignatureVerifier):
    """Verifies with 'gpg --verify' using the user's own trust store."""

    name = "gnupg"

    def __init__(self, binary: str = "gpg"):
        self.binary = binary

    def verify(self, manifest: Path, signature: Path) -> None:
        result = _run([self.binary, "--verify", str(signature), str(manifest)])
        if result.returncode != 0:
            raise VerificationError(
                f"PGP signature rejected by GnuPG: {result.stderr.strip()}"
            )
        logger.info(f"PGP signature verified with {self.binary}")


class GpgvVerifier(SignatureVerifier):
    """
    Verifies with gpgv.

    With a keyring the shipped public keys are trusted explicitly; without
    one gpgv falls back to its default trusted keyring.
    """

    name = "gpgv"

    def __init__(self, binary: str = "gpgv", keyring: Optional[Path] = None):
        self.binary = binary
        self.keyring = keyring

    def verify(self, manifest: Path, signature: Path) -> None:
        cmd = [self.binary]
        if self.keyring:
            cmd.extend(["--keyring", str(self.keyring)])
        cmd.extend([str(signature), str(manifest)])

        result = _run(cmd)
        if result.returncode != 0:
            raise VerificationError(
                f"PGP signature rejected: {result.stderr.strip()}"
            )
        logger.info(f"PGP signature verified with {self.binary}")


def create_signature_verifier(
    config: SignatureConfig, settings: Settings
) -> Optional[SignatureVerifier]:
    """
    Build the verifier for a resolved signature configuration.

    Args:
        config: Mechanism selected before the pipeline runs
        settings: Runtime settings (bundled keyring location)

    Returns:
        SignatureVerifier, or None when no mechanism is configured
    """
    if config.mode is SignatureMode.KEYBASE:
        return KeybaseVerifier(binary=config.binary or "keybase")
    if config.mode is SignatureMode.GNUPG:
        return GnupgVerifier(binary=config.binary or "gpg")
    if config.mode is SignatureMode.GPGV:
        keyring = settings.keyring_path if config.trust_bundled_keyring else None
        return GpgvVerifier(binary=config.binary or "gpgv", keyring=keyring)
    return None


# ============================================================================
# Checksum Verification
# ============================================================================


def extract_manifest_entry(manifest: Path, filename: str) -> Optional[str]:
    """
    Find the SHA256SUMS line describing one file.

    Supports "hash  filename" and "hash *filename" forms. Only an exact
    filename match counts, so terragrunt_windows_amd64 never matches
    terragrunt_windows_amd64.exe.

    Args:
        manifest: Path to SHA256SUMS
        filename: Artifact file name

    Returns:
        The line normalized to "hash  filename", or None if absent

    Raises:
        VerificationError: If the manifest cannot be read as text
    """
    try:
        lines = manifest.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise VerificationError(
            f"SHA256 hash does not match: unreadable {manifest.name}: {e}"
        ) from e

    for line in lines:
        parts = line.strip().split(maxsplit=1)
        if len(parts) != 2:
            continue
        hash_value, name = parts
        if name.startswith("*"):
            name = name[1:]
        if name.strip() == filename:
            return f"{hash_value}  {filename}"
    return None


class ChecksumVerifier:
    """
    Checks an artifact against SHA256SUMS with shasum or sha256sum.

    Example:
        >>> verifier = ChecksumVerifier()
        >>> if verifier.available:
        ...     verifier.verify(scope / "SHA256SUMS", "terragrunt_linux_amd64", scope)
    """

    def __init__(self, which: Callable[[str], Optional[str]] = shutil.which):
        self.command = self._find_command(which)

    @staticmethod
    def _find_command(which: Callable[[str], Optional[str]]) -> Optional[List[str]]:
        if which("shasum"):
            return ["shasum", "-a", "256", "-s", "-c", "-"]
        if which("sha256sum"):
            return ["sha256sum", "--status", "-c", "-"]
        return None

    @property
    def available(self) -> bool:
        return self.command is not None

    def verify(self, manifest: Path, filename: str, workdir: Path) -> None:
        """
        Verify the artifact inside workdir against its manifest entry.

        Args:
            manifest: Path to SHA256SUMS
            filename: Artifact file name, relative to workdir
            workdir: Directory holding the artifact

        Raises:
            VerificationError: If no entry exists or the digest differs
            RuntimeError: If no checksum tool is available
        """
        if self.command is None:
            raise RuntimeError("No checksum tool available")

        entry = extract_manifest_entry(manifest, filename)
        if entry is None:
            raise VerificationError(
                f"SHA256 hash does not match: no entry for {filename} in {manifest.name}"
            )

        result = _run(self.command, cwd=workdir, input=entry + "\n")
        if result.returncode != 0:
            raise VerificationError(f"SHA256 hash does not match for {filename}")
        logger.info(f"SHA256 hash matched for {filename}")


__all__ = [
    "SignatureVerifier",
    "KeybaseVerifier",
    "GnupgVerifier",
    "GpgvVerifier",
    "ChecksumVerifier",
    "create_signature_verifier",
    "extract_manifest_entry",
    "PUBLISHER",
]
