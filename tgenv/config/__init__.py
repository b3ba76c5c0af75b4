"""
Configuration for tgenv.

Settings are read from the environment once per process; marker files in the
installation root select the signature verification mechanism.
"""

from .settings import Settings, get_default_root
from .markers import (
    SignatureMode,
    SignatureConfig,
    load_yaml_config,
    resolve_signature_config,
)

__all__ = [
    "Settings",
    "get_default_root",
    "SignatureMode",
    "SignatureConfig",
    "load_yaml_config",
    "resolve_signature_config",
]
