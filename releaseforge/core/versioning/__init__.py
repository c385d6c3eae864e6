"""
Semantic version computation and release gating.

The engine reconciles tag history with the persisted version file,
classifies the last commit message into a bump, applies it, guards
against re-processing the same commit and evaluates the tag and release
gates.
"""

from releaseforge.core.versioning.baseline import (
    Baseline,
    BaselineResolver,
    BaselineSource,
    VersionStrategy,
)
from releaseforge.core.versioning.build_gate import BuildGateResult, should_build
from releaseforge.core.versioning.bump import (
    AppliedBump,
    BumpApplier,
    BumpClassifier,
    BumpDecision,
    resolve_forced_bump,
)
from releaseforge.core.versioning.current import resolve_current_version
from releaseforge.core.versioning.engine import VersionEngine, VersionResult
from releaseforge.core.versioning.gates import (
    ReleaseDecision,
    ReleaseGateEvaluator,
    resolve_branch_name,
)
from releaseforge.core.versioning.state import IdempotencyGuard, TextArtifact
from releaseforge.core.versioning.version import (
    ZERO_VERSION,
    BumpType,
    SemanticVersion,
    find_version,
    parse_version,
)

__all__ = [
    "AppliedBump",
    "Baseline",
    "BaselineResolver",
    "BaselineSource",
    "BuildGateResult",
    "BumpApplier",
    "BumpClassifier",
    "BumpDecision",
    "BumpType",
    "IdempotencyGuard",
    "ReleaseDecision",
    "ReleaseGateEvaluator",
    "SemanticVersion",
    "TextArtifact",
    "VersionEngine",
    "VersionResult",
    "VersionStrategy",
    "ZERO_VERSION",
    "find_version",
    "parse_version",
    "resolve_branch_name",
    "resolve_current_version",
    "resolve_forced_bump",
    "should_build",
]
