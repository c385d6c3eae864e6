"""Release gating: should this commit be tagged, should it be released.

The two gates are orthogonal to the bump pipeline. A commit with no bump
token can still be tagged (always_tag) and a commit on a feature branch
can still request a release; only the tag gate honours the branch
restriction.

Tag gate:
    branch allowed AND (always_tag OR tag token OR force_release
    OR (tag_on_release AND release gate))

Release gate:
    NOT no-release token AND (release token or alias OR force_release)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from releaseforge.core.config.release import ReleaseConfig
from releaseforge.core.exceptions import GitCommandError, GitError
from releaseforge.core.git.repository import DETACHED_MARKERS, RepositoryPort
from releaseforge.core.logging import get_logger

logger = get_logger(__name__)

DETACHED_HEAD = "HEAD"
_REF_PREFIXES = ("refs/heads/", "origin/")


@dataclass(frozen=True)
class ReleaseDecision:
    """Independent tag and release gates for one commit."""

    should_tag: bool
    should_release: bool
    is_release_commit: bool
    branch_allowed: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shouldTag": self.should_tag,
            "shouldRelease": self.should_release,
            "isReleaseCommit": self.is_release_commit,
            "branchAllowed": self.branch_allowed,
        }


def normalize_branch(name: Optional[str]) -> Optional[str]:
    """Strip ref prefixes CI systems add; None for blank or detached names."""
    if not name:
        return None
    branch = name.strip()
    for prefix in _REF_PREFIXES:
        if branch.startswith(prefix):
            branch = branch[len(prefix) :]
    if not branch or branch == DETACHED_HEAD:
        return None
    if branch.startswith(DETACHED_MARKERS):
        return None
    return branch


def resolve_branch_name(
    repository: RepositoryPort,
    env_branch: Optional[str] = None,
    default: str = "main",
) -> str:
    """Resolve the current branch name.

    Fallback chain: direct query, then the CI-provided branch name, then
    the first branch containing HEAD, then default. A detached checkout
    reports "HEAD" from the direct query, which counts as unresolved.

    Args:
        repository: Repository to query.
        env_branch: Branch exported by the CI system (BRANCH_NAME etc).
        default: Name used when every source fails.

    Returns:
        Branch name, never empty.
    """
    try:
        branch = normalize_branch(repository.current_branch())
    except GitCommandError as e:
        logger.warning("Direct branch query failed", error=e)
        branch = None
    if branch:
        return branch

    branch = normalize_branch(env_branch)
    if branch:
        logger.debug("Branch taken from CI environment", branch=branch)
        return branch

    try:
        for candidate in repository.branches_containing_head():
            branch = normalize_branch(candidate)
            if branch:
                logger.debug("Branch inferred from HEAD ancestry", branch=branch)
                return branch
    except GitError as e:
        logger.warning("Could not list branches containing HEAD", error=e)

    logger.warning("Branch could not be resolved, using default", branch=default)
    return default


class ReleaseGateEvaluator:
    """Evaluate the tag and release gates from a commit message."""

    def __init__(self, config: Optional[ReleaseConfig] = None) -> None:
        self.config = config or ReleaseConfig()

    def is_release_commit(self, message: str) -> bool:
        """True when the message carries the release token or an alias."""
        return any(token and token in message for token in self.config.release_tokens)

    def is_suppressed(self, message: str) -> bool:
        token = self.config.no_release_token
        return bool(token) and token in message

    def branch_allowed(self, branch: Optional[str]) -> bool:
        if not self.config.only_tag_on_main:
            return True
        return branch == self.config.main_branch

    def evaluate(
        self,
        message: Optional[str],
        branch: Optional[str],
        force_release: bool = False,
    ) -> ReleaseDecision:
        """Compute both gates.

        Args:
            message: Full commit message. None is treated as empty.
            branch: Resolved branch name.
            force_release: Explicit release override.

        Returns:
            ReleaseDecision.
        """
        text = message or ""
        cfg = self.config

        is_release = self.is_release_commit(text)
        should_release = not self.is_suppressed(text) and (is_release or force_release)

        allowed = self.branch_allowed(branch)
        wants_tag = (
            cfg.always_tag
            or bool(cfg.tag_token and cfg.tag_token in text)
            or force_release
            or (cfg.tag_on_release and should_release)
        )
        decision = ReleaseDecision(
            should_tag=allowed and wants_tag,
            should_release=should_release,
            is_release_commit=is_release,
            branch_allowed=allowed,
        )

        logger.info(
            "Release gates evaluated",
            branch=branch,
            should_tag=decision.should_tag,
            should_release=decision.should_release,
            is_release_commit=decision.is_release_commit,
        )
        return decision
