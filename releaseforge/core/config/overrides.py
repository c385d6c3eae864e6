"""
Per-invocation force overrides.

These come from the YAML ``overrides:`` section, the FORCE_* environment
variables and CLI flags, in increasing order of precedence.
"""

from dataclasses import dataclass
from typing import Optional

from releaseforge.core.config.validation import check_field_types
from releaseforge.core.env import FORCED_BUMPS
from releaseforge.core.exceptions import ConfigValidationError


@dataclass
class ForceOptions:
    """Explicit overrides that take precedence over commit message tokens."""

    force_bump: str = ""  # "" | "major" | "minor" | "patch"
    force_major: bool = False
    force_minor: bool = False
    force_patch: bool = False
    force_release: bool = False
    force_build: bool = False

    def __post_init__(self) -> None:
        """Validate the forced bump value."""
        if self.force_bump is None:
            self.force_bump = ""
        check_field_types(self, "overrides")

        self.force_bump = self.force_bump.strip().lower()
        if self.force_bump and self.force_bump not in FORCED_BUMPS:
            raise ConfigValidationError(
                f"Invalid force_bump: '{self.force_bump}'. "
                f"Valid options: {', '.join(sorted(FORCED_BUMPS))}"
            )

    @property
    def forced_bump_name(self) -> Optional[str]:
        """Name of the forced bump, or None when nothing is forced.

        An explicit force_bump wins; otherwise the flags are consulted in
        major, minor, patch order.
        """
        if self.force_bump:
            return self.force_bump
        if self.force_major:
            return "major"
        if self.force_minor:
            return "minor"
        if self.force_patch:
            return "patch"
        return None

    @property
    def any_forced(self) -> bool:
        """True when a bump or a release is forced."""
        return self.forced_bump_name is not None or self.force_release
