"""
Release gating and tagging configuration.

Provides the token and branch settings read by the release gate, the
tag publisher settings, and the token list of the build gate.
"""

from dataclasses import dataclass, field
from typing import List

from releaseforge.core.config.validation import check_field_types
from releaseforge.core.exceptions import ConfigValidationError


@dataclass
class ReleaseConfig:
    """Tag and release gate configuration."""

    release_token: str = "!release"
    release_aliases: List[str] = field(default_factory=list)
    no_release_token: str = "!norelease"  # empty disables suppression
    tag_token: str = "!tag"
    tag_on_release: bool = True
    always_tag: bool = False
    only_tag_on_main: bool = True
    main_branch: str = "main"

    # Tag publisher
    tag_prefix: str = "v"
    push_tags: bool = False
    remote: str = "origin"
    git_user_name: str = "releaseforge"
    git_user_email: str = "releaseforge@localhost"

    def __post_init__(self) -> None:
        """Validate release configuration."""
        check_field_types(self, "release")

        if not self.release_token:
            raise ConfigValidationError("release_token must not be empty")
        if not self.main_branch.strip():
            raise ConfigValidationError("main_branch must not be empty")
        self.main_branch = self.main_branch.strip()
        self.release_aliases = [alias for alias in self.release_aliases if alias]

    @property
    def release_tokens(self) -> List[str]:
        """The release token followed by its aliases."""
        return [self.release_token, *self.release_aliases]


@dataclass
class BuildGateConfig:
    """Token-driven build gate configuration."""

    required_tokens: List[str] = field(default_factory=lambda: ["!tag", "!release"])
    any_token: bool = False  # False = every token must be present

    def __post_init__(self) -> None:
        check_field_types(self, "build_gate")
