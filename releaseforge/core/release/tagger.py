"""
Local tag publisher.

Creates the annotated release tag for a computed version and optionally
pushes it. Remote release creation (HTTP API calls, asset uploads) is
left to the pipeline; this module only deals with git.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from releaseforge.core.config.release import ReleaseConfig
from releaseforge.core.exceptions import GitCommandError, TagError
from releaseforge.core.git.repository import RepositoryPort
from releaseforge.core.logging import get_logger
from releaseforge.core.versioning.gates import ReleaseDecision
from releaseforge.core.versioning.version import SemanticVersion

logger = get_logger(__name__)


@dataclass(frozen=True)
class TagResult:
    """What the publisher did with the release tag."""

    tag: str
    tagged: bool
    created: bool = False
    pushed: bool = False
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "tagged": self.tagged,
            "created": self.created,
            "pushed": self.pushed,
            "reason": self.reason,
        }


class TagPublisher:
    """Create (and optionally push) the release tag for a version."""

    def __init__(
        self,
        repository: RepositoryPort,
        config: Optional[ReleaseConfig] = None,
    ) -> None:
        self.repository = repository
        self.config = config or ReleaseConfig()

    def tag_name(self, version: SemanticVersion) -> str:
        return f"{self.config.tag_prefix}{version}"

    def publish(
        self,
        version: SemanticVersion,
        decision: ReleaseDecision,
        push: Optional[bool] = None,
    ) -> TagResult:
        """Publish the tag for version when the tag gate allows it.

        Args:
            version: Version to tag.
            decision: Gate decision for the current commit.
            push: Push after creating. Defaults to config.push_tags.

        Returns:
            TagResult.

        Raises:
            TagError: If the tag cannot be created or pushed.
        """
        tag = self.tag_name(version)
        push = self.config.push_tags if push is None else push

        if not decision.should_tag:
            reason = (
                "branch not allowed"
                if not decision.branch_allowed
                else "no tag token and not forced"
            )
            logger.info("Tag gate closed, not tagging", tag=tag, reason=reason)
            return TagResult(tag, tagged=False, reason=reason)

        if self.repository.tag_exists(tag):
            logger.info("Tag already exists, skipping creation", tag=tag)
            return TagResult(tag, tagged=True, created=False, reason="already exists")

        try:
            self.repository.create_tag(tag, f"Release {tag}")
        except GitCommandError as e:
            raise TagError(f"Could not create tag {tag}: {e.stderr or e}") from e
        logger.info("Created tag", tag=tag)

        pushed = False
        if push:
            try:
                self.repository.push_tag(self.config.remote, tag)
            except GitCommandError as e:
                raise TagError(
                    f"Could not push tag {tag} to {self.config.remote}: {e.stderr or e}"
                ) from e
            pushed = True
            logger.info("Pushed tag", tag=tag, remote=self.config.remote)

        return TagResult(tag, tagged=True, created=True, pushed=pushed, reason="created")
