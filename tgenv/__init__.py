"""
tgenv - Terragrunt version manager.

Resolves a requested Terragrunt version, downloads the release for the host
platform, verifies it and installs it into a versioned directory.
"""

__version__ = "0.1.0"
