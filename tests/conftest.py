"""
Pytest configuration and shared fixtures for tgenv tests.
"""

import hashlib
from pathlib import Path

import pytest

from tgenv.config.markers import SignatureConfig, SignatureMode
from tgenv.config.settings import Settings
from tgenv.core.platform import PlatformKey

REMOTE = "https://releases.example.com/download"
LIST_URL = "https://releases.example.com/versions"

REMOTE_VERSIONS = ["1.2.0-rc1", "1.1.0", "1.0.0"]


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def tgenv_root(tmp_path: Path) -> Path:
    """Installation root, not created up front."""
    return tmp_path / "tgenv"


@pytest.fixture
def settings(tgenv_root: Path) -> Settings:
    """Settings pointing at a temporary root and fake endpoints."""
    return Settings(root=tgenv_root, remote=REMOTE, list_url=LIST_URL)


@pytest.fixture
def linux_amd64() -> PlatformKey:
    return PlatformKey(os="linux", arch="amd64")


@pytest.fixture
def no_signature() -> SignatureConfig:
    return SignatureConfig(mode=SignatureMode.NONE)


@pytest.fixture
def artifact_bytes() -> bytes:
    return b"#!/bin/sh\necho terragrunt\n"


@pytest.fixture
def manifest_text(artifact_bytes: bytes) -> str:
    """SHA256SUMS listing the linux and windows artifacts."""
    digest = hashlib.sha256(artifact_bytes).hexdigest()
    return (
        f"{'0' * 64}  terragrunt_darwin_amd64\n"
        f"{digest}  terragrunt_linux_amd64\n"
        f"{'1' * 64}  terragrunt_windows_amd64.exe\n"
    )


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Working directory for a Terragrunt project."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from tgenv.core import platform

    platform.clear_platform_cache()
    yield
    platform.clear_platform_cache()
