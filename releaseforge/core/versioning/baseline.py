"""Baseline resolution: reconcile tag history and the persisted version file.

Two independent sources can claim to know the current version. The tag
candidate comes from git (nearest reachable tag or highest version-sorted
tag) and the file candidate from the version file written by a previous
run. The resolver turns them into one Baseline with its provenance.

Policies
--------
- file strategy: the file candidate alone, provenance "file".
- tag strategy, strict: the tag candidate alone, provenance "tag".
- tag strategy, hybrid (default): the greater of the two candidates.
  Ties go to the tag. Keeping the file in play makes bumps sticky across
  runs that never pushed a tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from releaseforge.core.logging import get_logger
from releaseforge.core.versioning.version import SemanticVersion, parse_version

logger = get_logger(__name__)


class BaselineSource(str, Enum):
    """Provenance of a baseline version."""

    TAG = "tag"
    FILE = "file"


class VersionStrategy(str, Enum):
    """Which source the baseline is read from."""

    TAG = "tag"
    FILE = "file"


@dataclass(frozen=True)
class Baseline:
    """The version considered current before any bump is applied."""

    version: SemanticVersion
    source: BaselineSource

    @property
    def from_tag(self) -> bool:
        return self.source is BaselineSource.TAG


class BaselineResolver:
    """Produce one authoritative baseline from tag and file candidates."""

    def __init__(
        self,
        strategy: VersionStrategy = VersionStrategy.TAG,
        strict_tag_baseline: bool = False,
    ) -> None:
        self.strategy = VersionStrategy(strategy)
        self.strict_tag_baseline = strict_tag_baseline

    @property
    def policy(self) -> str:
        """Human-readable policy name: file, strict-tag or hybrid."""
        if self.strategy is VersionStrategy.FILE:
            return "file"
        return "strict-tag" if self.strict_tag_baseline else "hybrid"

    def resolve(
        self,
        tag_candidate: Optional[str],
        file_candidate: Optional[str],
    ) -> Baseline:
        """Resolve the baseline.

        Args:
            tag_candidate: Tag name (or None when no tag matched).
            file_candidate: Version file contents (or None when absent).

        Returns:
            Baseline; 0.0.0 with provenance "tag" when neither source resolves.
        """
        tag_version = parse_version(tag_candidate)
        file_version = parse_version(file_candidate)

        if self.strategy is VersionStrategy.FILE:
            baseline = Baseline(file_version, BaselineSource.FILE)
        elif self.strict_tag_baseline:
            baseline = Baseline(tag_version, BaselineSource.TAG)
        elif file_version > tag_version:
            baseline = Baseline(file_version, BaselineSource.FILE)
        else:
            baseline = Baseline(tag_version, BaselineSource.TAG)

        logger.info(
            "Baseline resolved",
            policy=self.policy,
            tag=tag_version,
            file=file_version,
            baseline=baseline.version,
            source=baseline.source.value,
        )
        return baseline
