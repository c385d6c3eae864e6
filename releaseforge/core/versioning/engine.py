"""
Version computation engine.

Ties the pieces together for one pipeline invocation:

    guard check -> baseline -> classify -> apply -> persist -> gates

Everything the engine needs arrives as an explicit argument: the loaded
Config, a RepositoryPort, the per-invocation ForceOptions and the branch
name exported by CI. Nothing here reads or writes environment variables.
The outcome is a VersionResult that downstream steps consume.

JPL Power of Ten Compliance:
- Rule #1: No recursion
- Rule #4: Functions under 60 lines
- Rule #7: Check return values
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from releaseforge.core.config import Config, ForceOptions
from releaseforge.core.exceptions import GitCommandError
from releaseforge.core.git.repository import RepositoryPort
from releaseforge.core.logging import get_logger
from releaseforge.core.versioning.baseline import (
    Baseline,
    BaselineResolver,
    BaselineSource,
    VersionStrategy,
)
from releaseforge.core.versioning.bump import (
    AppliedBump,
    BumpApplier,
    BumpClassifier,
    BumpDecision,
    resolve_forced_bump,
)
from releaseforge.core.versioning.gates import (
    ReleaseDecision,
    ReleaseGateEvaluator,
    resolve_branch_name,
)
from releaseforge.core.versioning.state import IdempotencyGuard, TextArtifact
from releaseforge.core.versioning.version import BumpType, SemanticVersion, parse_version

logger = get_logger(__name__)


@dataclass(frozen=True)
class VersionResult:
    """Finished version and gate record for one invocation."""

    base_version: SemanticVersion
    baseline_source: BaselineSource
    version: SemanticVersion
    bump: BumpType
    forced_bump: str
    commits_since_tag: int
    cumulative_patch: bool
    decision: ReleaseDecision
    skipped: bool
    branch: str
    commit_message: str
    head_commit: str
    dry_run: bool = False

    @property
    def is_release(self) -> bool:
        return self.decision.should_release

    @property
    def should_tag(self) -> bool:
        return self.decision.should_tag

    def to_dict(self) -> Dict[str, Any]:
        """Hand-off record for tag, release and changelog steps."""
        return {
            "baseVersion": str(self.base_version),
            "baselineSource": self.baseline_source.value,
            "version": str(self.version),
            "bump": self.bump.value,
            "forcedBump": self.forced_bump,
            "commitsSinceTag": self.commits_since_tag,
            "cumulativePatch": self.cumulative_patch,
            "isRelease": self.decision.should_release,
            "shouldTag": self.decision.should_tag,
            "skipped": self.skipped,
            "branch": self.branch,
            "commitMessage": self.commit_message,
            "shouldRelease": self.decision.should_release,
            "isReleaseCommit": self.decision.is_release_commit,
            "headCommit": self.head_commit,
        }

    def to_env(self) -> List[str]:
        """KEY=value lines for CI shells."""

        def flag(value: bool) -> str:
            return "true" if value else "false"

        return [
            f"BUILD_VERSION={self.version}",
            f"BASE_VERSION={self.base_version}",
            f"VERSION_BUMP={self.bump.value}",
            f"IS_RELEASE={flag(self.decision.should_release)}",
            f"SHOULD_TAG={flag(self.decision.should_tag)}",
            f"VERSION_SKIPPED={flag(self.skipped)}",
            f"BRANCH_NAME={self.branch}",
        ]


class VersionEngine:
    """Compute the next version and release gates for the current commit."""

    def __init__(self, config: Config, repository: RepositoryPort) -> None:
        self.config = config
        self.repository = repository

        vcfg = config.versioning
        self.version_file = TextArtifact(config.version_file_path)
        self.guard = IdempotencyGuard(
            TextArtifact(config.state_file_path), enabled=vcfg.skip_on_same_commit
        )
        self.resolver = BaselineResolver(
            VersionStrategy(vcfg.strategy), vcfg.strict_tag_baseline
        )
        self.classifier = BumpClassifier(
            major_token=vcfg.major_token,
            minor_token=vcfg.minor_token,
            patch_token=vcfg.patch_token,
            default_bump=vcfg.default_bump,
        )
        self.applier = BumpApplier(
            repository=repository,
            cumulative_patch=vcfg.cumulative_patch,
            tag_pattern=vcfg.tag_pattern,
        )
        self.gates = ReleaseGateEvaluator(config.release)

    def run(
        self,
        overrides: Optional[ForceOptions] = None,
        env_branch: Optional[str] = None,
        dry_run: bool = False,
    ) -> VersionResult:
        """Run one version computation.

        Args:
            overrides: Force options. Defaults to config.overrides.
            env_branch: Branch name exported by CI, used when HEAD is detached.
            dry_run: Compute everything but write neither file.

        Returns:
            VersionResult.

        Raises:
            RepositoryUnavailableError: If the commit identity cannot be read.
            StateFileError: If the version or state file cannot be written.
        """
        overrides = overrides if overrides is not None else self.config.overrides
        self._refresh_tags()

        head = self.repository.head_commit()
        logger.bind(commit=head[:12])
        try:
            return self._compute(head, overrides, env_branch, dry_run)
        finally:
            logger.unbind("commit")

    def _compute(
        self,
        head: str,
        overrides: ForceOptions,
        env_branch: Optional[str],
        dry_run: bool,
    ) -> VersionResult:
        message = self.repository.commit_message()
        branch = resolve_branch_name(
            self.repository, env_branch, default=self.config.release.main_branch
        )
        forced = resolve_forced_bump(overrides)
        decision = self.gates.evaluate(message, branch, overrides.force_release)

        if self.guard.should_skip(head, forced=overrides.any_forced):
            baseline, version = self._reuse_previous(message)
            return self._result(
                baseline,
                AppliedBump(version),
                BumpDecision(BumpType.NONE),
                decision,
                skipped=True,
                branch=branch,
                message=message,
                head=head,
                dry_run=dry_run,
            )

        baseline = self.resolver.resolve(self._tag_candidate(), self.version_file.read_line())
        bump = self.classifier.classify(message, forced)
        applied = self.applier.apply(baseline, bump)

        if dry_run:
            logger.info("Dry run, no files written", version=applied.version)
        else:
            self._persist(applied.version, head)

        return self._result(
            baseline,
            applied,
            bump,
            decision,
            skipped=False,
            branch=branch,
            message=message,
            head=head,
            dry_run=dry_run,
        )

    def _refresh_tags(self) -> None:
        if not self.config.versioning.fetch_tags:
            return
        try:
            self.repository.fetch_tags()
        except GitCommandError as e:
            logger.warning("Tag fetch failed, using local tags", error=e.stderr or e)

    def _tag_candidate(self) -> Optional[str]:
        """Tag name selected by tag_mode, or None."""
        vcfg = self.config.versioning
        try:
            if vcfg.tag_mode == "latest":
                tag = self.repository.latest_tag(vcfg.tag_pattern)
            else:
                tag = self.repository.nearest_tag(vcfg.tag_pattern)
        except GitCommandError as e:
            logger.warning("Tag lookup failed", mode=vcfg.tag_mode, error=e)
            return None

        if tag is None:
            logger.info("No tag matches", pattern=vcfg.tag_pattern)
        return tag

    def _reuse_previous(self, message: str) -> Tuple[Baseline, SemanticVersion]:
        """Version already computed for a processed commit.

        The version file holds it only when every run writes it. Otherwise
        the computation is repeated without writing anything.
        """
        if self.config.versioning.write_version_file and self.version_file.exists():
            version = parse_version(self.version_file.read_line())
            return Baseline(version, BaselineSource.FILE), version

        baseline = self.resolver.resolve(
            self._tag_candidate(), self.version_file.read_line()
        )
        applied = self.applier.apply(baseline, self.classifier.classify(message))
        return baseline, applied.version

    def _persist(self, version: SemanticVersion, head: str) -> None:
        """Write the version file (if enabled) then the state file."""
        if self.config.versioning.write_version_file:
            self.version_file.write_line(str(version))
        self.guard.record(head)
        logger.info("Version persisted", version=version)

    def _result(
        self,
        baseline: Baseline,
        applied: AppliedBump,
        bump: BumpDecision,
        decision: ReleaseDecision,
        *,
        skipped: bool,
        branch: str,
        message: str,
        head: str,
        dry_run: bool,
    ) -> VersionResult:
        return VersionResult(
            base_version=baseline.version,
            baseline_source=baseline.source,
            version=applied.version,
            bump=bump.kind,
            forced_bump=bump.kind.value if bump.forced else "",
            commits_since_tag=applied.commits_since_tag,
            cumulative_patch=applied.cumulative_applied,
            decision=decision,
            skipped=skipped,
            branch=branch,
            commit_message=message,
            head_commit=head,
            dry_run=dry_run,
        )
