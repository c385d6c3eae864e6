"""
Shared pytest fixtures and configuration for ReleaseForge tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **workspace**: Temporary repository root for version and state files
- **fake_repo**: In-memory RepositoryPort with scriptable answers
- **make_config**: Config factory rooted at the workspace
- **make_engine**: VersionEngine factory wired to fake_repo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from releaseforge.core.config import (
    BuildGateConfig,
    Config,
    ForceOptions,
    ReleaseConfig,
    VersioningConfig,
)
from releaseforge.core.exceptions import GitCommandError, RepositoryUnavailableError
from releaseforge.core.versioning import VersionEngine, parse_version


# ============================================================================
# Fake Repository
# ============================================================================


@dataclass
class FakeRepository:
    """In-memory stand-in for GitRepository.

    Tags are listed oldest first; nearest_tag returns the last one unless
    `nearest` is set explicitly. Set `unavailable` to simulate a directory
    that is not a repository.
    """

    head: str = "a1b2c3d"
    message: str = "chore: update"
    branch: Optional[str] = "main"
    containing: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    nearest: Optional[str] = None
    commits_since: Dict[str, int] = field(default_factory=dict)
    count_error: bool = False
    fetch_error: bool = False
    push_error: bool = False
    unavailable: bool = False

    fetch_calls: int = 0
    created_tags: List[str] = field(default_factory=list)
    pushed_tags: List[str] = field(default_factory=list)
    tag_messages: Dict[str, str] = field(default_factory=dict)

    def _check(self) -> None:
        if self.unavailable:
            raise RepositoryUnavailableError("not a git repository")

    def head_commit(self) -> str:
        self._check()
        return self.head

    def commit_message(self) -> str:
        self._check()
        return self.message

    def current_branch(self) -> Optional[str]:
        return self.branch

    def branches_containing_head(self) -> List[str]:
        return list(self.containing)

    def nearest_tag(self, pattern: str) -> Optional[str]:
        if self.nearest is not None:
            return self.nearest
        return self.tags[-1] if self.tags else None

    def latest_tag(self, pattern: str) -> Optional[str]:
        if not self.tags:
            return None
        return max(self.tags, key=parse_version)

    def count_commits_since(self, tag: str) -> int:
        if self.count_error:
            raise GitCommandError(
                "git rev-list failed", args=["rev-list"], returncode=128
            )
        return self.commits_since.get(tag, 0)

    def tag_exists(self, tag: str) -> bool:
        return tag in self.tags

    def fetch_tags(self) -> None:
        self.fetch_calls += 1
        if self.fetch_error:
            raise GitCommandError("git fetch failed", args=["fetch"], returncode=1)

    def create_tag(self, tag: str, message: str) -> None:
        self.tags.append(tag)
        self.created_tags.append(tag)
        self.tag_messages[tag] = message

    def push_tag(self, remote: str, tag: str) -> None:
        if self.push_error:
            raise GitCommandError("git push failed", args=["push"], returncode=1)
        self.pushed_tags.append(f"{remote}/{tag}")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty repository root for version and state files."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def fake_repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def make_config(workspace: Path) -> Callable[..., Config]:
    """Build a Config rooted at the workspace.

    Keyword arguments are split by section: versioning fields go to
    VersioningConfig, release fields to ReleaseConfig. fetch_tags defaults
    to False so tests do not depend on a remote.
    """

    def _make(**kwargs: Any) -> Config:
        versioning_keys = set(VersioningConfig.__dataclass_fields__)
        release_keys = set(ReleaseConfig.__dataclass_fields__)
        versioning = {"fetch_tags": False}
        release: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key in versioning_keys:
                versioning[key] = value
            elif key in release_keys:
                release[key] = value
            else:
                raise KeyError(key)
        config = Config(
            versioning=VersioningConfig(**versioning),
            release=ReleaseConfig(**release),
            build_gate=BuildGateConfig(),
            overrides=ForceOptions(),
        )
        config._base_path = workspace
        return config

    return _make


@pytest.fixture
def make_engine(
    make_config: Callable[..., Config], fake_repo: FakeRepository
) -> Callable[..., VersionEngine]:
    """Build a VersionEngine on fake_repo with the given config fields."""

    def _make(**kwargs: Any) -> VersionEngine:
        return VersionEngine(make_config(**kwargs), fake_repo)

    return _make
