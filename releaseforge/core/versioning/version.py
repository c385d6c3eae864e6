"""Semantic version value type and tolerant parser.

Tag names and version files in the wild carry prefixes ("v", "release-")
and suffixes ("-rc.1", trailing newlines). The parser extracts the first
MAJOR.MINOR.PATCH triple it can find and treats a string without one as
0.0.0 rather than an error.

JPL Power of Ten Compliance:
- Rule #1: No recursion
- Rule #5: Assert preconditions
- Rule #9: Complete type hints
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

VERSION_TRIPLE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


class BumpType(Enum):
    """Version bump types following SemVer."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @classmethod
    def from_name(cls, name: str) -> "BumpType":
        """Look up a bump type by its lower-case name.

        Raises:
            ValueError: If name is not a known bump type.
        """
        return cls(name.strip().lower())


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """Immutable MAJOR.MINOR.PATCH version.

    Ordering is the lexicographic (major, minor, patch) comparison.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        """Validate version components.

        Rule #5: Assert preconditions.
        """
        assert self.major >= 0, "major must be non-negative"
        assert self.minor >= 0, "minor must be non-negative"
        assert self.patch >= 0, "patch must be non-negative"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "string": str(self),
        }

    def bump(self, bump_type: BumpType) -> "SemanticVersion":
        """Create new version with specified bump.

        A higher component increment resets every lower component to zero.

        Args:
            bump_type: Type of version bump.

        Returns:
            New SemanticVersion with bumped values.
        """
        if bump_type == BumpType.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        elif bump_type == BumpType.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        elif bump_type == BumpType.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        return self

    def with_patch(self, patch: int) -> "SemanticVersion":
        """Return a copy with the patch component replaced."""
        return SemanticVersion(self.major, self.minor, patch)


ZERO_VERSION = SemanticVersion(0, 0, 0)


def find_version(text: Optional[str]) -> Optional[SemanticVersion]:
    """Extract the first MAJOR.MINOR.PATCH occurrence from text.

    Args:
        text: Arbitrary string such as a tag name or file contents.

    Returns:
        SemanticVersion, or None when text holds no version triple.

    Example:
        >>> find_version("release-v3.4.5-rc.1")
        SemanticVersion(major=3, minor=4, patch=5)
    """
    if not text:
        return None

    match = VERSION_TRIPLE.search(text)
    if not match:
        return None

    return SemanticVersion(
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
    )


def parse_version(text: Optional[str]) -> SemanticVersion:
    """Parse a loosely formatted version string, defaulting to 0.0.0.

    Never raises: absence of a parseable version is a valid outcome.

    Args:
        text: Tag name, file contents or None.

    Returns:
        The first version triple found in text, or 0.0.0.
    """
    return find_version(text) or ZERO_VERSION
