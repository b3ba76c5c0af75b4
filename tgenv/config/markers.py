"""
Opt-in marker files selecting the signature verification mechanism.

Two marker files may exist in the installation root:

    use-gnupg   verify SHA256SUMS.sig with GnuPG
                    binary: gpg            (optional command override)
    use-gpgv    verify SHA256SUMS.sig with gpgv
                    binary: gpgv           (optional command override)
                    trust-tgenv: yes       (use the keyring shipped with tgenv)

Both files are read once, before the pipeline runs, into a SignatureConfig.
"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from tgenv.config.settings import Settings

logger = logging.getLogger(__name__)

GNUPG_MARKER = "use-gnupg"
GPGV_MARKER = "use-gpgv"


class SignatureMode(Enum):
    """Signature verification mechanism, in priority order."""

    KEYBASE = "keybase"
    GNUPG = "gnupg"
    GPGV = "gpgv"
    NONE = "none"


@dataclass(frozen=True)
class SignatureConfig:
    """
    Signature verification mechanism resolved for this run.

    Attributes:
        mode: Selected mechanism
        binary: Command used to verify (None for NONE)
        trust_bundled_keyring: gpgv only, pass the shipped keyring explicitly
    """

    mode: SignatureMode
    binary: Optional[str] = None
    trust_bundled_keyring: bool = False


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty if the file is missing, empty or
        not a mapping)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ValueError: If YAML parsing fails
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in {config_file}: {e}")

    if not isinstance(config, dict):
        return {}
    return config


def _as_bool(value: Any) -> bool:
    """Interpret YAML 1.1 booleans as well as strings and integers."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return False


def resolve_signature_config(
    settings: Settings, which: Callable[[str], Optional[str]] = shutil.which
) -> SignatureConfig:
    """
    Decide which signature mechanism this run uses.

    Priority: keybase on PATH, then use-gnupg, then use-gpgv, else none.

    Args:
        settings: Runtime settings (marker files live in settings.root)
        which: Executable lookup, injectable for tests

    Returns:
        SignatureConfig for the run
    """
    if which("keybase"):
        logger.debug("keybase found on PATH")
        return SignatureConfig(mode=SignatureMode.KEYBASE, binary="keybase")

    gnupg_marker = settings.root / GNUPG_MARKER
    if gnupg_marker.is_file():
        config = load_yaml_config(gnupg_marker)
        binary = str(config.get("binary") or "gpg")
        logger.debug(f"{GNUPG_MARKER} marker found, using {binary}")
        return SignatureConfig(mode=SignatureMode.GNUPG, binary=binary)

    gpgv_marker = settings.root / GPGV_MARKER
    if gpgv_marker.is_file():
        config = load_yaml_config(gpgv_marker)
        binary = str(config.get("binary") or "gpgv")
        trusted = _as_bool(config.get("trust-tgenv"))
        logger.debug(f"{GPGV_MARKER} marker found, using {binary} (trusted={trusted})")
        return SignatureConfig(
            mode=SignatureMode.GPGV, binary=binary, trust_bundled_keyring=trusted
        )

    return SignatureConfig(mode=SignatureMode.NONE)


__all__ = [
    "SignatureMode",
    "SignatureConfig",
    "load_yaml_config",
    "resolve_signature_config",
    "GNUPG_MARKER",
    "GPGV_MARKER",
]
