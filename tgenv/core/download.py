"""
HTTP downloads with progress reporting.

Single-attempt GET requests over requests: there is no retry, backoff or
resume. Any network error or non-2xx status becomes a TransportError and the
partially written file is removed.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from tgenv.core.exceptions import TransportError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        TransportError: On network failure or non-2xx response
        ValueError: If URL or destination is invalid

    Example:
        >>> from tgenv.core.download import download_file
        >>> def on_progress(progress):
        ...     print(f"Downloaded {progress.percentage:.1f}%")
        >>>
        >>> url = "https://example.com/terragrunt_linux_amd64"
        >>> download_file(url, Path("tmp/terragrunt_linux_amd64"), on_progress)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading from {url}")

    try:
        response = requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        )
        response.raise_for_status()
        _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise TransportError(f"Download of {url} failed: {e}") from e

    logger.debug(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    """
    Write a streamed response body to disk, reporting progress.

    Progress is reported at most once per 0.5 seconds, plus once on completion.
    """
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5
                or (total_size > 0 and downloaded >= total_size)
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = max(total_size - downloaded, 0)
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=min(downloaded / total_size * 100, 100.0)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time


def fetch(url: str, timeout: int = 30, **kwargs) -> requests.Response:
    """
    Perform a GET request and return the successful response.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds
        **kwargs: Passed through to requests.get (e.g. headers)

    Returns:
        Response with a 2xx status

    Raises:
        TransportError: On network failure or non-2xx response
    """
    logger.debug(f"GET {url}")
    try:
        response = requests.get(url, timeout=timeout, **kwargs)
        response.raise_for_status()
    except RequestException as e:
        raise TransportError(f"Request to {url} failed: {e}") from e
    return response


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "download_file",
    "fetch",
    "format_progress",
]
