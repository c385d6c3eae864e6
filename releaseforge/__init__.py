"""ReleaseForge - Semantic version computation and release gating for CI.

This package computes the next version of a repository from its tags,
a persisted version file and the last commit message, and decides
whether the build should be tagged and released.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
