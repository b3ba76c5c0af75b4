"""
Centralized exception hierarchy for tgenv.

Every fatal condition in the install pipeline is raised as one of these
exceptions. Only the CLI layer turns them into messages and exit codes.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class TgenvError(Exception):
    """Base exception for all tgenv errors."""

    exit_code = 1


# ============================================================================
# Invocation Exceptions
# ============================================================================


class UsageError(TgenvError):
    """Raised when the command line is malformed (e.g. too many arguments)."""

    exit_code = 2


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class ResolutionError(TgenvError):
    """Raised when no concrete version can be derived from a specifier."""

    pass


class NoMatchingVersionError(ResolutionError):
    """Raised when the remote listing has no entry matching the specifier."""

    def __init__(self, requested: str, where: str = "remote"):
        self.requested = requested
        super().__init__(f"No versions matching '{requested}' found in {where}")


class MinRequiredError(ResolutionError):
    """Raised when 'min-required' cannot be satisfied for the current project."""

    exit_code = 3


# ============================================================================
# Pipeline Stage Exceptions
# ============================================================================


class TransportError(TgenvError):
    """Raised when fetching a listing, artifact, manifest or signature fails."""

    pass


class VerificationError(TgenvError):
    """Raised when a signature or checksum does not match."""

    pass


class InstallationError(TgenvError):
    """Raised when the version directory cannot be populated."""

    pass


__all__ = [
    "TgenvError",
    "UsageError",
    "ResolutionError",
    "NoMatchingVersionError",
    "MinRequiredError",
    "TransportError",
    "VerificationError",
    "InstallationError",
]
