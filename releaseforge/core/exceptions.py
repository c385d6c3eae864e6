"""
Centralized Exception Hierarchy for ReleaseForge.

All exceptions inherit from ReleaseForgeError for easy catching.

Each exception includes:
- user_message: Human-readable description of what went wrong
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue
- error_code: Unique identifier for documentation lookup (e.g., "RF-GIT-001")

Exception Hierarchy
-------------------
    ReleaseForgeError (base)
    ├── GitError
    │   ├── GitCommandError
    │   └── RepositoryUnavailableError
    ├── TagError
    ├── StateFileError
    └── ValidationError
        └── ConfigValidationError

Propagation Policy
------------------
Only RepositoryUnavailableError aborts a version computation. Every other
git failure met while resolving a baseline or enriching a patch is caught
where it happens and replaced with a safe default plus a warning log.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


def get_root_cause(exc: BaseException) -> BaseException:
    """Extract the root cause from a chain of exceptions.

    Follows nested __cause__ and __context__ attributes to find
    the original error that started the chain.

    Args:
        exc: Exception to analyze

    Returns:
        Root cause exception (may be the same as input)
    """
    seen = set()
    current = exc

    while current is not None:
        if id(current) in seen:
            break
        seen.add(id(current))

        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class ReleaseForgeError(Exception):
    """
    Base exception for all ReleaseForge errors.

    Example
    -------
        try:
            engine.run()
        except ReleaseForgeError as e:
            logger.error(f"Version computation failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "RF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize ReleaseForgeError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "RF-GIT-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(message)

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# Git Exceptions
# ============================================================================


class GitError(ReleaseForgeError):
    """Base exception for failures talking to git."""

    error_code = "RF-GIT-000"
    why_it_happened = "A git command could not be completed"
    how_to_fix = ["Run the git command by hand to see the full output"]


class GitCommandError(GitError):
    """
    Raised when a single git invocation exits non-zero or times out.

    Example
    -------
        repo.count_commits_since("v9.9.9")
        # Raises: GitCommandError("git rev-list --count v9.9.9..HEAD failed: ...")
    """

    error_code = "RF-GIT-001"
    why_it_happened = (
        "git returned a non-zero exit status, usually because a ref is "
        "missing or the clone is shallow"
    )
    how_to_fix = [
        "Fetch full history and tags: git fetch --unshallow --tags",
        "Check that the referenced tag or branch exists",
    ]

    def __init__(
        self,
        message: str,
        *,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.git_args = list(args)
        self.returncode = returncode
        self.stderr = stderr


class RepositoryUnavailableError(GitError):
    """
    Raised when commit or branch identity cannot be queried at all.

    This is the only failure that aborts a version computation: without a
    commit identity no baseline or idempotency decision is meaningful.
    """

    error_code = "RF-GIT-002"
    why_it_happened = (
        "The working directory is not a git repository, or git is not installed"
    )
    how_to_fix = [
        "Run releaseforge from inside a git checkout (or pass --root)",
        "Install git and make sure it is on PATH",
        "In CI, make sure the checkout step ran before this step",
    ]


# ============================================================================
# Tagging Exceptions
# ============================================================================


class TagError(ReleaseForgeError):
    """Raised when a release tag cannot be created or pushed."""

    error_code = "RF-TAG-000"
    why_it_happened = "The release tag could not be created or pushed"
    how_to_fix = [
        "Check that the CI credentials allow pushing tags",
        "Check for tag protection rules on the remote",
        "Run with --no-push to create the tag locally only",
    ]


# ============================================================================
# State Exceptions
# ============================================================================


class StateFileError(ReleaseForgeError):
    """Raised when the version file or state file cannot be written."""

    error_code = "RF-STATE-001"
    why_it_happened = "A version or state file could not be written to disk"
    how_to_fix = [
        "Check that the workspace is writable",
        "Check the version_file and state_file paths in the configuration",
    ]


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(ReleaseForgeError):
    """Raised when input validation fails."""

    error_code = "RF-VAL-000"
    why_it_happened = "The input did not pass validation"
    how_to_fix = ["Check the value against the documented options"]


class ConfigValidationError(ValidationError):
    """
    Raised when configuration values are invalid.

    Example
    -------
        VersioningConfig(strategy="branch")
        # Raises: ConfigValidationError("Invalid strategy: 'branch'. Valid options: file, tag")
    """

    error_code = "RF-VAL-001"
    why_it_happened = "A configuration value is outside the accepted set"
    how_to_fix = [
        "Check releaseforge.yaml for typos",
        "Check RELEASEFORGE_* and FORCE_* environment variables",
    ]
