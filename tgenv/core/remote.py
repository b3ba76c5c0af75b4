"""
Remote listing of published Terragrunt versions.

The listing is consumed as an opaque feed of version strings. Two body
formats are accepted:

- JSON: a list of objects with a "name" field (GitHub tags API). Pages are
  followed through the Link: rel="next" header.
- Anything else: newline-delimited text, one version per line.

The listing is assumed to be ordered newest first. That order is a
precondition of the upstream feed and is passed through untouched; callers
that pick "the first match" rely on it.
"""

import logging
from typing import List

from tgenv.config.settings import Settings
from tgenv.core.download import fetch
from tgenv.core.exceptions import TransportError

logger = logging.getLogger(__name__)

MAX_PAGES = 50


def _normalize(entry: str) -> str:
    entry = entry.strip()
    if entry.startswith("v"):
        entry = entry[1:]
    return entry


def list_remote_versions(settings: Settings) -> List[str]:
    """
    Fetch every published version.

    Args:
        settings: Runtime settings (list_url, http_timeout)

    Returns:
        Version strings in listing order, leading 'v' stripped

    Raises:
        TransportError: If the listing cannot be fetched or decoded
    """
    versions: List[str] = []
    url = settings.list_url

    for _ in range(MAX_PAGES):
        response = fetch(url, timeout=settings.http_timeout)
        content_type = response.headers.get("content-type", "")

        if "json" in content_type:
            try:
                payload = response.json()
            except ValueError as e:
                raise TransportError(f"Invalid JSON listing from {url}: {e}") from e
            if not isinstance(payload, list):
                raise TransportError(f"Unexpected listing format from {url}")
            versions.extend(
                _normalize(item["name"])
                for item in payload
                if isinstance(item, dict) and item.get("name")
            )
        else:
            versions.extend(
                _normalize(line) for line in response.text.splitlines() if line.strip()
            )

        next_link = response.links.get("next", {}).get("url")
        if not next_link:
            break
        url = next_link

    logger.debug(f"Remote listing has {len(versions)} versions")
    return versions


__all__ = ["list_remote_versions"]
