"""
Versioning configuration.

Controls where the baseline version comes from, how commit messages are
scanned for bump tokens, and where the version and state files live.
"""

from dataclasses import dataclass

from releaseforge.core.config.validation import check_field_types
from releaseforge.core.env import DEFAULT_BUMPS, TAG_MODES, VERSION_STRATEGIES
from releaseforge.core.exceptions import ConfigValidationError


def _check_choice(name: str, value: str, allowed: frozenset) -> None:
    if value not in allowed:
        raise ConfigValidationError(
            f"Invalid {name}: '{value}'. "
            f"Valid options: {', '.join(sorted(allowed))}"
        )


@dataclass
class VersioningConfig:
    """Version resolution configuration."""

    version_file: str = "version.txt"
    state_file: str = ".semver-state"
    strategy: str = "tag"  # "tag" | "file"
    strict_tag_baseline: bool = False  # False = hybrid max(tag, file)
    tag_pattern: str = "v[0-9]*"
    tag_mode: str = "nearest"  # "nearest" | "latest"
    cumulative_patch: bool = False
    default_bump: str = "none"  # "patch" | "none"
    major_token: str = "!major"
    minor_token: str = "!minor"
    patch_token: str = "!patch"  # empty disables the explicit patch token
    skip_on_same_commit: bool = True
    write_version_file: bool = True
    fetch_tags: bool = True

    def __post_init__(self) -> None:
        """Normalize and validate versioning configuration."""
        check_field_types(self, "versioning")

        self.strategy = self.strategy.strip().lower()
        self.tag_mode = self.tag_mode.strip().lower()
        self.default_bump = self.default_bump.strip().lower()

        _check_choice("strategy", self.strategy, VERSION_STRATEGIES)
        _check_choice("tag_mode", self.tag_mode, TAG_MODES)
        _check_choice("default_bump", self.default_bump, DEFAULT_BUMPS)

        if not self.version_file.strip():
            raise ConfigValidationError("version_file must not be empty")
        if not self.state_file.strip():
            raise ConfigValidationError("state_file must not be empty")
        if not self.tag_pattern.strip():
            raise ConfigValidationError("tag_pattern must not be empty")
