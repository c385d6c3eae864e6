"""Git repository collaborator.

Every question the versioning engine asks about the repository goes
through RepositoryPort. GitRepository answers them by running git in a
subprocess (never through a shell); tests substitute an in-memory fake.

Failure semantics
-----------------
- head_commit / commit_message: RepositoryUnavailableError. Without a
  commit identity nothing else is meaningful.
- nearest_tag / latest_tag / current_branch: None. "No tag" and
  "detached HEAD" are normal states, not errors.
- count_commits_since / fetch_tags / create_tag / push_tag:
  GitCommandError. Callers decide whether the failure is best-effort.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from releaseforge.core.exceptions import GitCommandError, RepositoryUnavailableError
from releaseforge.core.logging import get_logger

logger = get_logger(__name__)

StrOrPath = Union[str, Path]

DEFAULT_TIMEOUT_S = 30.0
DETACHED_MARKERS = ("(HEAD detached", "(no branch")


class RepositoryPort(Protocol):
    """Queries the versioning engine needs from a repository."""

    def head_commit(self) -> str:
        """Identifier of the current commit."""
        ...

    def commit_message(self) -> str:
        """Full message (subject and body) of the current commit."""
        ...

    def current_branch(self) -> Optional[str]:
        """Checked-out branch name; "HEAD" or None when detached."""
        ...

    def branches_containing_head(self) -> List[str]:
        """Local branch names whose history contains the current commit."""
        ...

    def nearest_tag(self, pattern: str) -> Optional[str]:
        """Closest tag reachable from HEAD that matches the glob pattern."""
        ...

    def latest_tag(self, pattern: str) -> Optional[str]:
        """Highest tag by version sort that matches the glob pattern."""
        ...

    def count_commits_since(self, tag: str) -> int:
        """Number of commits in (tag, HEAD]."""
        ...

    def tag_exists(self, tag: str) -> bool:
        """Whether the tag exists locally."""
        ...

    def fetch_tags(self) -> None:
        """Refresh tags from the remote."""
        ...

    def create_tag(self, tag: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        ...

    def push_tag(self, remote: str, tag: str) -> None:
        """Push a single tag to a remote."""
        ...


class GitRepository:
    """RepositoryPort implementation backed by the git command line."""

    def __init__(
        self,
        root: StrOrPath,
        git_executable: str = "git",
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_name: str = "releaseforge",
        user_email: str = "releaseforge@localhost",
    ) -> None:
        self.root = Path(root)
        self._git = git_executable
        self._timeout_s = timeout_s
        self._user_name = user_name
        self._user_email = user_email

    # --- plumbing ---

    def _run_git(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        """Run git with args in the repository root.

        Raises:
            RepositoryUnavailableError: If the git executable cannot be started.
            GitCommandError: If the command times out.
        """
        cmd = [self._git, "-C", str(self.root), *args]
        logger.debug("Running git", args=" ".join(args))
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
            )
        except FileNotFoundError as e:
            raise RepositoryUnavailableError(
                f"git executable not found: {self._git}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"git {' '.join(args)} timed out after {self._timeout_s}s",
                args=args,
            ) from e

    def _git_output(self, args: Sequence[str]) -> str:
        """Run git and return stripped stdout, raising on non-zero exit."""
        proc = self._run_git(args)
        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise GitCommandError(
                f"git {' '.join(args)} failed: {stderr}",
                args=args,
                returncode=proc.returncode,
                stderr=stderr,
            )
        return (proc.stdout or "").strip()

    def _git_optional(self, args: Sequence[str]) -> Optional[str]:
        """Run git and return stripped stdout, or None on non-zero exit or empty output."""
        proc = self._run_git(args)
        if proc.returncode != 0:
            return None
        out = (proc.stdout or "").strip()
        return out or None

    # --- identity ---

    def head_commit(self) -> str:
        try:
            return self._git_output(["rev-parse", "HEAD"])
        except GitCommandError as e:
            raise RepositoryUnavailableError(
                f"Cannot resolve HEAD in {self.root}: {e.stderr}"
            ) from e

    def commit_message(self) -> str:
        try:
            return self._git_output(["log", "-1", "--pretty=%B"])
        except GitCommandError as e:
            raise RepositoryUnavailableError(
                f"Cannot read the last commit message in {self.root}: {e.stderr}"
            ) from e

    def current_branch(self) -> Optional[str]:
        return self._git_optional(["rev-parse", "--abbrev-ref", "HEAD"])

    def branches_containing_head(self) -> List[str]:
        out = self._git_output(["branch", "--contains", "HEAD"])
        return parse_branch_listing(out)

    # --- tags ---

    def nearest_tag(self, pattern: str) -> Optional[str]:
        return self._git_optional(
            ["describe", "--tags", "--abbrev=0", "--match", pattern]
        )

    def latest_tag(self, pattern: str) -> Optional[str]:
        out = self._git_optional(
            ["-c", "versionsort.suffix=-", "tag", "-l", pattern, "--sort=-v:refname"]
        )
        if not out:
            return None
        return out.splitlines()[0].strip() or None

    def count_commits_since(self, tag: str) -> int:
        out = self._git_output(["rev-list", "--count", f"{tag}..HEAD"])
        try:
            return int(out)
        except ValueError as e:
            raise GitCommandError(
                f"Unexpected commit count output: {out!r}", args=["rev-list"]
            ) from e

    def tag_exists(self, tag: str) -> bool:
        proc = self._run_git(["rev-parse", "-q", "--verify", f"refs/tags/{tag}"])
        return proc.returncode == 0

    def fetch_tags(self) -> None:
        self._git_output(["fetch", "--tags", "--force", "--prune"])

    def create_tag(self, tag: str, message: str) -> None:
        self._git_output(
            [
                "-c",
                f"user.name={self._user_name}",
                "-c",
                f"user.email={self._user_email}",
                "tag",
                "-a",
                tag,
                "-m",
                message,
            ]
        )

    def push_tag(self, remote: str, tag: str) -> None:
        self._git_output(["push", remote, f"refs/tags/{tag}"])


def parse_branch_listing(output: str) -> List[str]:
    """Parse `git branch` output into branch names.

    The checked-out branch (marked with "* ") comes first; detached-HEAD
    entries are dropped.
    """
    current: List[str] = []
    others: List[str] = []
    for raw in output.splitlines():
        line = raw.rstrip()
        if not line.strip():
            continue
        is_current = line.startswith("*")
        name = line[1:].strip() if is_current else line.strip()
        if name.startswith(DETACHED_MARKERS):
            continue
        (current if is_current else others).append(name)
    return current + others
