"""Tests for BaselineResolver reconciliation policies."""

from __future__ import annotations

import pytest

from releaseforge.core.versioning import (
    BaselineResolver,
    BaselineSource,
    SemanticVersion,
    VersionStrategy,
)


class TestHybridPolicy:
    """Tag strategy without strict baseline: the greater candidate wins."""

    def test_file_greater_than_tag(self) -> None:
        """tag=1.2.0, file=1.3.5 resolves to the file."""
        baseline = BaselineResolver().resolve("v1.2.0", "1.3.5")

        assert baseline.version == SemanticVersion(1, 3, 5)
        assert baseline.source is BaselineSource.FILE

    def test_tag_greater_than_file(self) -> None:
        """tag=2.0.0, file=1.9.9 resolves to the tag."""
        baseline = BaselineResolver().resolve("v2.0.0", "1.9.9")

        assert baseline.version == SemanticVersion(2, 0, 0)
        assert baseline.source is BaselineSource.TAG

    def test_tie_goes_to_tag(self) -> None:
        baseline = BaselineResolver().resolve("v1.4.0", "1.4.0")

        assert baseline.version == SemanticVersion(1, 4, 0)
        assert baseline.source is BaselineSource.TAG
        assert baseline.from_tag

    def test_missing_tag_uses_file(self) -> None:
        baseline = BaselineResolver().resolve(None, "0.3.1")

        assert baseline.version == SemanticVersion(0, 3, 1)
        assert baseline.source is BaselineSource.FILE

    def test_neither_source_defaults_to_zero_tag(self) -> None:
        """No tag and no file resolves to 0.0.0 from the tag."""
        baseline = BaselineResolver().resolve(None, None)

        assert baseline.version == SemanticVersion(0, 0, 0)
        assert baseline.source is BaselineSource.TAG

    def test_baseline_is_max_of_candidates(self) -> None:
        """Hybrid baseline equals the maximum for a grid of inputs."""
        candidates = ["0.0.1", "0.9.9", "1.0.0", "1.2.3", "2.0.0"]
        resolver = BaselineResolver()
        for tag in candidates:
            for file_text in candidates:
                baseline = resolver.resolve(f"v{tag}", file_text)
                expected = max(
                    SemanticVersion(*map(int, tag.split("."))),
                    SemanticVersion(*map(int, file_text.split("."))),
                )
                assert baseline.version == expected


class TestStrictPolicies:
    """Strict policies take exactly one source."""

    def test_strict_tag_ignores_greater_file(self) -> None:
        resolver = BaselineResolver(VersionStrategy.TAG, strict_tag_baseline=True)
        baseline = resolver.resolve("v1.2.3", "9.9.9")

        assert baseline.version == SemanticVersion(1, 2, 3)
        assert baseline.source is BaselineSource.TAG

    def test_file_strategy_ignores_greater_tag(self) -> None:
        resolver = BaselineResolver(VersionStrategy.FILE)
        baseline = resolver.resolve("v5.0.0", "1.0.0")

        assert baseline.version == SemanticVersion(1, 0, 0)
        assert baseline.source is BaselineSource.FILE

    def test_file_strategy_missing_file(self) -> None:
        baseline = BaselineResolver(VersionStrategy.FILE).resolve("v5.0.0", None)

        assert baseline.version == SemanticVersion(0, 0, 0)
        assert baseline.source is BaselineSource.FILE

    @pytest.mark.parametrize(
        "strategy,strict,policy",
        [
            (VersionStrategy.FILE, False, "file"),
            (VersionStrategy.FILE, True, "file"),
            (VersionStrategy.TAG, True, "strict-tag"),
            (VersionStrategy.TAG, False, "hybrid"),
        ],
    )
    def test_policy_name(
        self, strategy: VersionStrategy, strict: bool, policy: str
    ) -> None:
        assert BaselineResolver(strategy, strict).policy == policy

    def test_strategy_accepts_string(self) -> None:
        assert BaselineResolver("file").strategy is VersionStrategy.FILE
