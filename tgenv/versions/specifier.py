"""
Version specifiers.

A specifier is what the user asks for. It is turned into a regular
expression that is matched against a version listing:

    0.50.0           exact version       ^0\\.50\\.0$
    latest           newest release      ^\\d+\\.\\d+\\.\\d+$
    latest:<regex>   newest match        <regex>
    min-required     lowest version allowed by the project configuration
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

LATEST_PATTERN = r"^\d+\.\d+\.\d+$"


class SpecifierKind(Enum):
    EXACT = "exact"
    LATEST = "latest"
    LATEST_FILTERED = "latest-filtered"
    MIN_REQUIRED = "min-required"


@dataclass(frozen=True)
class VersionSpecifier:
    """
    Parsed version request.

    Attributes:
        kind: Which form of request this is
        raw: The string as given by the user (used in error messages)
        value: Exact version or user regex; empty for LATEST and MIN_REQUIRED
    """

    kind: SpecifierKind
    raw: str
    value: str = ""

    @classmethod
    def parse(cls, text: str) -> "VersionSpecifier":
        """
        Parse a user-supplied specifier.

        Args:
            text: Non-empty specifier string

        Returns:
            VersionSpecifier

        Raises:
            ValueError: If text is empty

        Example:
            >>> VersionSpecifier.parse("latest:^0\\.4").kind
            <SpecifierKind.LATEST_FILTERED: 'latest-filtered'>
        """
        text = text.strip()
        if not text:
            raise ValueError("Version specifier cannot be empty")

        if text == "min-required":
            return cls(SpecifierKind.MIN_REQUIRED, text)
        if text == "latest":
            return cls(SpecifierKind.LATEST, text)
        if text.startswith("latest:"):
            return cls(SpecifierKind.LATEST_FILTERED, text, text[len("latest:"):])

        version = text[1:] if text.startswith("v") else text
        return cls(SpecifierKind.EXACT, text, version)

    @property
    def pattern(self) -> str:
        """
        Regular expression selecting matching versions.

        Raises:
            ValueError: For MIN_REQUIRED, which is resolved differently
        """
        if self.kind is SpecifierKind.LATEST:
            return LATEST_PATTERN
        if self.kind is SpecifierKind.LATEST_FILTERED:
            return self.value
        if self.kind is SpecifierKind.EXACT:
            return f"^{re.escape(self.value)}$"
        raise ValueError("min-required has no version pattern")


def first_match(pattern: str, versions: Iterable[str]) -> Optional[str]:
    """
    Return the first version matching pattern, in listing order.

    Raises:
        ValueError: If pattern is not a valid regular expression
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid version pattern '{pattern}': {e}") from e

    for version in versions:
        if regex.search(version):
            return version
    return None


__all__ = ["SpecifierKind", "VersionSpecifier", "first_match", "LATEST_PATTERN"]
