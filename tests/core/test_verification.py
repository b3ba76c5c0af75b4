"""
Unit tests for verification module.

External tools are never executed: subprocess.run is patched and its exit
status drives the outcome.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from tgenv.config.markers import SignatureConfig, SignatureMode
from tgenv.core.exceptions import VerificationError
from tgenv.core.verification import (
    ChecksumVerifier,
    GnupgVerifier,
    GpgvVerifier,
    KeybaseVerifier,
    create_signature_verifier,
    extract_manifest_entry,
)

RUN = "tgenv.core.verification.subprocess.run"


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def manifest(tmp_path, manifest_text) -> Path:
    path = tmp_path / "SHA256SUMS"
    path.write_text(manifest_text)
    return path


@pytest.fixture
def signature(tmp_path) -> Path:
    path = tmp_path / "SHA256SUMS.sig"
    path.write_bytes(b"sig")
    return path


class TestExtractManifestEntry:
    """Test extract_manifest_entry()."""

    def test_finds_exact_entry(self, manifest):
        entry = extract_manifest_entry(manifest, "terragrunt_linux_amd64")

        assert entry is not None
        assert entry.endswith("  terragrunt_linux_amd64")

    def test_does_not_match_prefix(self, tmp_path):
        """Test windows_amd64 does not match windows_amd64.exe."""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{'1' * 64}  terragrunt_windows_amd64.exe\n")

        assert extract_manifest_entry(manifest, "terragrunt_windows_amd64") is None

    def test_binary_mode_marker(self, tmp_path):
        """Test '*filename' entries are recognized."""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{'a' * 64} *terragrunt_darwin_arm64\n")

        entry = extract_manifest_entry(manifest, "terragrunt_darwin_arm64")

        assert entry == f"{'a' * 64}  terragrunt_darwin_arm64"

    def test_missing_entry(self, manifest):
        assert extract_manifest_entry(manifest, "terragrunt_freebsd_386") is None

    def test_undecodable_manifest(self, tmp_path):
        """Test a manifest that is not text fails as a hash mismatch."""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_bytes(b"\xff\xfe garbage\n")

        with pytest.raises(VerificationError, match="unreadable SHA256SUMS"):
            extract_manifest_entry(manifest, "terragrunt_linux_amd64")

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(VerificationError, match="SHA256 hash does not match"):
            extract_manifest_entry(tmp_path / "SHA256SUMS", "terragrunt_linux_amd64")


class TestChecksumVerifier:
    """Test ChecksumVerifier."""

    def test_prefers_shasum(self):
        verifier = ChecksumVerifier(which=lambda name: f"/usr/bin/{name}")

        assert verifier.command[0] == "shasum"

    def test_falls_back_to_sha256sum(self):
        verifier = ChecksumVerifier(
            which=lambda name: "/usr/bin/sha256sum" if name == "sha256sum" else None
        )

        assert verifier.command == ["sha256sum", "--status", "-c", "-"]

    def test_unavailable(self):
        verifier = ChecksumVerifier(which=lambda name: None)

        assert verifier.available is False

    def test_verify_passes_entry_on_stdin(self, manifest, tmp_path):
        verifier = ChecksumVerifier(which=lambda name: f"/usr/bin/{name}")

        with patch(RUN, return_value=_completed(0)) as mock_run:
            verifier.verify(manifest, "terragrunt_linux_amd64", tmp_path)

        _, kwargs = mock_run.call_args
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["input"].strip().endswith("terragrunt_linux_amd64")

    def test_verify_mismatch(self, manifest, tmp_path):
        verifier = ChecksumVerifier(which=lambda name: f"/usr/bin/{name}")

        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(VerificationError, match="SHA256 hash does not match"):
                verifier.verify(manifest, "terragrunt_linux_amd64", tmp_path)

    def test_verify_missing_entry(self, manifest, tmp_path):
        """Test an artifact absent from the manifest fails without running the tool."""
        verifier = ChecksumVerifier(which=lambda name: f"/usr/bin/{name}")

        with patch(RUN) as mock_run:
            with pytest.raises(VerificationError, match="SHA256 hash does not match"):
                verifier.verify(manifest, "terragrunt_linux_386", tmp_path)

        mock_run.assert_not_called()

    def test_verify_without_tool(self, manifest, tmp_path):
        verifier = ChecksumVerifier(which=lambda name: None)

        with pytest.raises(RuntimeError):
            verifier.verify(manifest, "terragrunt_linux_amd64", tmp_path)


class TestKeybaseVerifier:
    """Test KeybaseVerifier."""

    def test_preflight_not_logged_in(self):
        verifier = KeybaseVerifier()

        with patch(RUN, return_value=_completed(0, stdout="Logged in:     no\n")):
            assert verifier.preflight() == "keybase is not logged in"

    def test_preflight_not_following(self):
        verifier = KeybaseVerifier()
        results = [
            _completed(0, stdout="Username: me\nLogged in:     yes\n"),
            _completed(0, stdout="alice\nbob\n"),
        ]

        with patch(RUN, side_effect=results):
            assert "does not follow gruntwork" in verifier.preflight()

    def test_preflight_ok(self):
        verifier = KeybaseVerifier()
        results = [
            _completed(0, stdout="Logged in:     yes\n"),
            _completed(0, stdout="alice\ngruntwork\n"),
        ]

        with patch(RUN, side_effect=results):
            assert verifier.preflight() is None

    def test_preflight_status_timeout_skips(self):
        """Test a hung 'keybase status' becomes a skip reason."""
        verifier = KeybaseVerifier()

        with patch(RUN, side_effect=subprocess.TimeoutExpired(["keybase"], 120)):
            assert "timed out" in verifier.preflight()

    def test_preflight_following_not_installed_skips(self):
        verifier = KeybaseVerifier()
        results = [
            _completed(0, stdout="Logged in:     yes\n"),
            FileNotFoundError("keybase"),
        ]

        with patch(RUN, side_effect=results):
            assert "not installed" in verifier.preflight()

    def test_verify_command(self, manifest, signature):
        verifier = KeybaseVerifier()

        with patch(RUN, return_value=_completed(0)) as mock_run:
            verifier.verify(manifest, signature)

        cmd = mock_run.call_args[0][0]
        assert cmd[:5] == ["keybase", "pgp", "verify", "-S", "gruntwork"]
        assert cmd[-4:] == ["-d", str(signature), "-i", str(manifest)]

    def test_verify_mismatch(self, manifest, signature):
        verifier = KeybaseVerifier()

        with patch(RUN, return_value=_completed(1, stderr="bad signature")):
            with pytest.raises(VerificationError, match="signature does not match"):
                verifier.verify(manifest, signature)


class TestGnupgVerifier:
    """Test GnupgVerifier."""

    def test_verify_command(self, manifest, signature):
        verifier = GnupgVerifier(binary="gpg2")

        with patch(RUN, return_value=_completed(0)) as mock_run:
            verifier.verify(manifest, signature)

        assert mock_run.call_args[0][0] == [
            "gpg2",
            "--verify",
            str(signature),
            str(manifest),
        ]

    def test_verify_rejected(self, manifest, signature):
        with patch(RUN, return_value=_completed(2)):
            with pytest.raises(VerificationError, match="signature rejected"):
                GnupgVerifier().verify(manifest, signature)

    def test_binary_not_installed(self, manifest, signature):
        with patch(RUN, side_effect=FileNotFoundError("gpg")):
            with pytest.raises(VerificationError, match="not installed"):
                GnupgVerifier().verify(manifest, signature)


class TestGpgvVerifier:
    """Test GpgvVerifier."""

    def test_default_trust_store(self, manifest, signature):
        with patch(RUN, return_value=_completed(0)) as mock_run:
            GpgvVerifier().verify(manifest, signature)

        assert "--keyring" not in mock_run.call_args[0][0]

    def test_bundled_keyring(self, manifest, signature, tmp_path):
        keyring = tmp_path / "gruntwork-keys.pgp"

        with patch(RUN, return_value=_completed(0)) as mock_run:
            GpgvVerifier(keyring=keyring).verify(manifest, signature)

        assert mock_run.call_args[0][0] == [
            "gpgv",
            "--keyring",
            str(keyring),
            str(signature),
            str(manifest),
        ]

    def test_verify_rejected(self, manifest, signature):
        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(VerificationError, match="signature rejected"):
                GpgvVerifier().verify(manifest, signature)


class TestCreateSignatureVerifier:
    """Test create_signature_verifier()."""

    def test_none(self, settings):
        config = SignatureConfig(mode=SignatureMode.NONE)

        assert create_signature_verifier(config, settings) is None

    def test_keybase(self, settings):
        config = SignatureConfig(mode=SignatureMode.KEYBASE, binary="keybase")

        assert isinstance(create_signature_verifier(config, settings), KeybaseVerifier)

    def test_gpgv_trusted_uses_settings_keyring(self, settings):
        config = SignatureConfig(
            mode=SignatureMode.GPGV, binary="gpgv", trust_bundled_keyring=True
        )

        verifier = create_signature_verifier(config, settings)

        assert isinstance(verifier, GpgvVerifier)
        assert verifier.keyring == settings.keyring_path

    def test_gpgv_untrusted(self, settings):
        config = SignatureConfig(mode=SignatureMode.GPGV, binary="gpgv")

        assert create_signature_verifier(config, settings).keyring is None
