"""
Shared utilities for CLI commands.

Provides common output helpers used across multiple CLI commands.
"""

import sys
from typing import Callable

from tgenv.core.download import DownloadProgress


def print_error(message: str, details: str = ""):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Falls back to ASCII-safe characters if the symbols can't be encoded.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = message.replace("✓", "[OK]").replace("✗", "[ERROR]")
        print(safe_message, file=file)


def progress_printer(stream=None) -> Callable[[DownloadProgress], None]:
    """
    Build a download progress callback that redraws a single line.

    Progress is only drawn on interactive terminals.

    Args:
        stream: Output stream (default: stderr)

    Returns:
        Callback accepting DownloadProgress
    """
    stream = stream or sys.stderr
    interactive = hasattr(stream, "isatty") and stream.isatty()

    def on_progress(progress: DownloadProgress):
        if not interactive:
            return
        stream.write(f"\r  {progress}")
        if progress.total_bytes and progress.bytes_downloaded >= progress.total_bytes:
            stream.write("\n")
        stream.flush()

    return on_progress
