"""Bump classification and application.

BumpClassifier turns a commit message (plus an optional forced bump)
into a BumpDecision. BumpApplier turns a Baseline plus a BumpDecision
into the next SemanticVersion, optionally folding in the number of
commits since the nearest tag ("cumulative patch").

Token matching is a case-sensitive substring test. "!MAJOR" does not
match "!major", and "x!majorly" does.

JPL Power of Ten Compliance:
- Rule #1: No recursion
- Rule #5: Assert preconditions
- Rule #7: Check return values (commit count failures are contained)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from releaseforge.core.config.overrides import ForceOptions
from releaseforge.core.exceptions import GitError
from releaseforge.core.git.repository import RepositoryPort
from releaseforge.core.logging import get_logger
from releaseforge.core.versioning.baseline import Baseline
from releaseforge.core.versioning.version import BumpType, SemanticVersion

logger = get_logger(__name__)


@dataclass(frozen=True)
class BumpDecision:
    """Which component to increment and whether an override chose it."""

    kind: BumpType
    forced: bool = False


@dataclass(frozen=True)
class AppliedBump:
    """Outcome of applying a BumpDecision to a Baseline."""

    version: SemanticVersion
    commits_since_tag: int = 0
    cumulative_applied: bool = False


def resolve_forced_bump(overrides: Optional[ForceOptions]) -> Optional[BumpType]:
    """Map force overrides to a BumpType.

    Args:
        overrides: Per-invocation force options, or None.

    Returns:
        The forced BumpType, or None when no bump is forced.
    """
    if overrides is None:
        return None
    name = overrides.forced_bump_name
    if name is None:
        return None
    return BumpType.from_name(name)


def _contains(message: str, token: str) -> bool:
    return bool(token) and token in message


class BumpClassifier:
    """Classify a commit message into a bump kind.

    Precedence: forced bump, major token, minor token, patch token, then
    the configured default ("patch" bumps every build, "none" requires
    an explicit token).
    """

    def __init__(
        self,
        major_token: str = "!major",
        minor_token: str = "!minor",
        patch_token: str = "!patch",
        default_bump: str = "none",
    ) -> None:
        self.major_token = major_token
        self.minor_token = minor_token
        self.patch_token = patch_token
        self.default_kind = BumpType.from_name(default_bump)
        assert self.default_kind in (
            BumpType.PATCH,
            BumpType.NONE,
        ), "default_bump must be patch or none"

    def classify(
        self, message: Optional[str], forced: Optional[BumpType] = None
    ) -> BumpDecision:
        """Classify a commit message.

        Args:
            message: Full commit message. None is treated as empty.
            forced: Explicit bump that overrides token scanning.

        Returns:
            BumpDecision with forced=True only when an override was used.
        """
        if forced is not None and forced is not BumpType.NONE:
            decision = BumpDecision(forced, forced=True)
        else:
            decision = BumpDecision(self._scan(message or ""))

        logger.info(
            "Bump classified", bump=decision.kind.value, forced=decision.forced
        )
        return decision

    def _scan(self, message: str) -> BumpType:
        if _contains(message, self.major_token):
            return BumpType.MAJOR
        if _contains(message, self.minor_token):
            return BumpType.MINOR
        if _contains(message, self.patch_token):
            return BumpType.PATCH
        return self.default_kind


class BumpApplier:
    """Apply bump arithmetic with optional cumulative patch enrichment."""

    def __init__(
        self,
        repository: Optional[RepositoryPort] = None,
        cumulative_patch: bool = False,
        tag_pattern: str = "v[0-9]*",
    ) -> None:
        self.repository = repository
        self.cumulative_patch = cumulative_patch
        self.tag_pattern = tag_pattern

    def apply(self, baseline: Baseline, decision: BumpDecision) -> AppliedBump:
        """Compute the next version.

        The cumulative enrichment only runs for an unforced patch bump on
        a tag-derived baseline. When the commit count cannot be obtained
        the plain +1 stands.

        Args:
            baseline: Resolved baseline.
            decision: Bump decision from the classifier.

        Returns:
            AppliedBump with the new version and the commit count used.
        """
        bumped = baseline.version.bump(decision.kind)
        if not self._enrichment_applies(baseline, decision):
            return AppliedBump(bumped)

        count = self._commits_since_nearest_tag()
        if count is None or count <= 0:
            return AppliedBump(bumped, commits_since_tag=max(count or 0, 0))

        version = baseline.version.with_patch(baseline.version.patch + count)
        logger.info(
            "Cumulative patch applied",
            base=baseline.version,
            commits_since_tag=count,
            version=version,
        )
        return AppliedBump(version, commits_since_tag=count, cumulative_applied=True)

    def _enrichment_applies(self, baseline: Baseline, decision: BumpDecision) -> bool:
        return (
            self.cumulative_patch
            and self.repository is not None
            and decision.kind is BumpType.PATCH
            and not decision.forced
            and baseline.from_tag
        )

    def _commits_since_nearest_tag(self) -> Optional[int]:
        """Count commits since the nearest matching tag, or None on failure."""
        assert self.repository is not None
        try:
            tag = self.repository.nearest_tag(self.tag_pattern)
            if not tag:
                logger.warning(
                    "Cumulative patch skipped: no tag matches",
                    pattern=self.tag_pattern,
                )
                return None
            return int(self.repository.count_commits_since(tag))
        except (GitError, ValueError) as e:
            logger.warning("Cumulative patch skipped: commit count failed", error=e)
            return None
