"""Tests for the configuration tree and YAML loader.

Tests cover:
- Dataclass defaults and validation
- Config.from_dict / to_dict
- load_config file discovery, YAML errors and ${VAR} expansion
- Environment overrides
"""

from __future__ import annotations

from pathlib import Path

import pytest

from releaseforge.core.config import (
    Config,
    ForceOptions,
    ReleaseConfig,
    VersioningConfig,
    apply_env_overrides,
    expand_env_vars,
    load_config,
)
from releaseforge.core.exceptions import ConfigValidationError
from releaseforge.core.versioning import ReleaseGateEvaluator


class TestDefaults:
    """Defaults match the documented configuration surface."""

    def test_versioning_defaults(self) -> None:
        cfg = VersioningConfig()

        assert cfg.version_file == "version.txt"
        assert cfg.state_file == ".semver-state"
        assert cfg.strategy == "tag"
        assert cfg.strict_tag_baseline is False
        assert cfg.tag_pattern == "v[0-9]*"
        assert cfg.tag_mode == "nearest"
        assert cfg.cumulative_patch is False
        assert cfg.default_bump == "none"
        assert cfg.skip_on_same_commit is True

    def test_release_defaults(self) -> None:
        cfg = ReleaseConfig()

        assert cfg.release_token == "!release"
        assert cfg.only_tag_on_main is True
        assert cfg.main_branch == "main"
        assert cfg.release_tokens == ["!release"]

    def test_paths_resolve_against_base(self, tmp_path: Path) -> None:
        config = Config()
        config._base_path = tmp_path

        assert config.version_file_path == tmp_path / "version.txt"
        assert config.state_file_path == tmp_path / ".semver-state"

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere" / "v.txt"
        config = Config(versioning=VersioningConfig(version_file=str(absolute)))

        assert config.version_file_path == absolute


class TestValidation:
    """Invalid values raise ConfigValidationError."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"strategy": "branch"},
            {"tag_mode": "oldest"},
            {"default_bump": "major"},
            {"version_file": " "},
            {"tag_pattern": ""},
        ],
    )
    def test_versioning_rejects(self, kwargs) -> None:
        with pytest.raises(ConfigValidationError):
            VersioningConfig(**kwargs)

    def test_values_normalized(self) -> None:
        cfg = VersioningConfig(strategy=" FILE ", tag_mode="Latest")

        assert cfg.strategy == "file"
        assert cfg.tag_mode == "latest"

    def test_force_bump_rejected(self) -> None:
        with pytest.raises(ConfigValidationError):
            ForceOptions(force_bump="huge")

    def test_log_level_rejected(self) -> None:
        with pytest.raises(ConfigValidationError):
            Config(log_level="LOUD")

    def test_error_carries_code(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            VersioningConfig(strategy="branch")

        assert exc_info.value.error_code == "RF-VAL-001"
        assert "branch" in str(exc_info.value)


class TestFromDict:
    """Tests for Config.from_dict and to_dict."""

    def test_sections(self, tmp_path: Path) -> None:
        config = Config.from_dict(
            {
                "versioning": {"strategy": "file", "cumulative_patch": "yes"},
                "release": {"main_branch": "master", "release_aliases": ["!ship"]},
                "build_gate": {"any_token": True},
                "overrides": {"force_bump": "minor"},
                "log_level": "debug",
            },
            tmp_path,
        )

        assert config.versioning.strategy == "file"
        assert config.versioning.cumulative_patch is True
        assert config.release.release_tokens == ["!release", "!ship"]
        assert config.build_gate.any_token is True
        assert config.overrides.forced_bump_name == "minor"
        assert config.log_level == "DEBUG"
        assert config.base_path == tmp_path

    def test_unknown_keys_ignored(self) -> None:
        config = Config.from_dict({"versioning": {"stratgey": "file"}})
        assert config.versioning.strategy == "tag"

    def test_invalid_bool_string(self) -> None:
        with pytest.raises(ConfigValidationError):
            Config.from_dict({"versioning": {"cumulative_patch": "sometimes"}})

    def test_scalar_alias_becomes_list(self) -> None:
        config = Config.from_dict({"release": {"release_aliases": "!ship"}})

        assert config.release.release_tokens == ["!release", "!ship"]
        evaluator = ReleaseGateEvaluator(config.release)
        assert evaluator.evaluate("fix: a typo in docs", "main").should_release is False

    def test_scalar_required_token_becomes_list(self) -> None:
        config = Config.from_dict({"build_gate": {"required_tokens": "!deploy"}})
        assert config.build_gate.required_tokens == ["!deploy"]

    @pytest.mark.parametrize(
        "data",
        [
            {"versioning": {"strategy": None}},
            {"versioning": {"tag_pattern": 5}},
            {"versioning": {"cumulative_patch": 1}},
            {"release": {"main_branch": None}},
            {"release": {"release_aliases": {"ship": True}}},
            {"release": {"release_aliases": ["!ship", 3]}},
            {"build_gate": {"any_token": "maybe"}},
            {"overrides": {"force_release": []}},
        ],
    )
    def test_wrong_types_rejected(self, data) -> None:
        with pytest.raises(ConfigValidationError):
            Config.from_dict(data)

    def test_null_force_bump_means_unset(self) -> None:
        config = Config.from_dict({"overrides": {"force_bump": None}})
        assert config.overrides.forced_bump_name is None

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(ConfigValidationError):
            Config.from_dict({"release": ["main"]})

    def test_to_dict_round_trip_keys(self) -> None:
        data = Config().to_dict()

        assert set(data) == {
            "versioning",
            "release",
            "build_gate",
            "overrides",
            "log_level",
        }
        assert data["versioning"]["tag_pattern"] == "v[0-9]*"


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(base_path=tmp_path, environ={})

        assert config.versioning.strategy == "tag"
        assert config.base_path == tmp_path

    def test_discovers_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "releaseforge.yaml").write_text(
            "versioning:\n  default_bump: patch\nrelease:\n  always_tag: true\n",
            encoding="utf-8",
        )

        config = load_config(base_path=tmp_path, environ={})

        assert config.versioning.default_bump == "patch"
        assert config.release.always_tag is True

    def test_null_value_in_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "releaseforge.yaml").write_text(
            "versioning:\n  strategy:\n", encoding="utf-8"
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(base_path=tmp_path, environ={})

        assert "versioning.strategy" in str(exc_info.value)

    def test_hidden_file_name(self, tmp_path: Path) -> None:
        (tmp_path / ".releaseforge.yaml").write_text(
            "versioning:\n  tag_mode: latest\n", encoding="utf-8"
        )

        assert load_config(base_path=tmp_path, environ={}).versioning.tag_mode == "latest"

    def test_explicit_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(tmp_path / "nope.yaml", tmp_path, environ={})

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "releaseforge.yaml"
        path.write_text("versioning: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(path, tmp_path, environ={})

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "releaseforge.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(path, tmp_path, environ={})

    def test_env_var_expansion(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("RF_TEST_BRANCH", "trunk")
        path = tmp_path / "releaseforge.yaml"
        path.write_text(
            "release:\n  main_branch: ${RF_TEST_BRANCH}\n"
            "  remote: ${RF_TEST_REMOTE:upstream}\n",
            encoding="utf-8",
        )

        config = load_config(path, tmp_path, environ={})

        assert config.release.main_branch == "trunk"
        assert config.release.remote == "upstream"


class TestEnvOverrides:
    """Environment variables override file values."""

    def test_force_flags(self) -> None:
        config = apply_env_overrides(
            Config(),
            {"FORCE_MAJOR": "TRUE", "FORCE_RELEASE": "true", "FORCE_BUILD": "1"},
        )

        assert config.overrides.force_major is True
        assert config.overrides.force_release is True
        assert config.overrides.force_build is True
        assert config.overrides.forced_bump_name == "major"

    def test_false_flag_does_not_clear(self) -> None:
        config = Config(overrides=ForceOptions(force_patch=True))
        apply_env_overrides(config, {"FORCE_PATCH": "false"})

        assert config.overrides.force_patch is True

    def test_force_bump_whitelist(self) -> None:
        config = apply_env_overrides(Config(), {"RELEASEFORGE_FORCE_BUMP": "Minor"})
        assert config.overrides.force_bump == "minor"

        config = apply_env_overrides(Config(), {"RELEASEFORGE_FORCE_BUMP": "huge"})
        assert config.overrides.force_bump == ""

    def test_versioning_overrides(self) -> None:
        config = apply_env_overrides(
            Config(),
            {
                "RELEASEFORGE_STRATEGY": "file",
                "RELEASEFORGE_TAG_MODE": "latest",
                "RELEASEFORGE_DEFAULT_BUMP": "patch",
                "RELEASEFORGE_LOG_LEVEL": "warning",
            },
        )

        assert config.versioning.strategy == "file"
        assert config.versioning.tag_mode == "latest"
        assert config.versioning.default_bump == "patch"
        assert config.log_level == "WARNING"

    def test_invalid_values_ignored(self) -> None:
        config = apply_env_overrides(
            Config(),
            {"RELEASEFORGE_STRATEGY": "branch", "RELEASEFORGE_LOG_LEVEL": "LOUD"},
        )

        assert config.versioning.strategy == "tag"
        assert config.log_level == "INFO"

    def test_env_beats_file(self, tmp_path: Path) -> None:
        (tmp_path / "releaseforge.yaml").write_text(
            "versioning:\n  strategy: tag\n", encoding="utf-8"
        )

        config = load_config(
            base_path=tmp_path, environ={"RELEASEFORGE_STRATEGY": "file"}
        )

        assert config.versioning.strategy == "file"


class TestExpandEnvVars:
    def test_nested(self, monkeypatch) -> None:
        monkeypatch.setenv("RF_X", "1")
        value = expand_env_vars({"a": ["${RF_X}", {"b": "${RF_MISSING:two}"}], "c": 3})

        assert value == {"a": ["1", {"b": "two"}], "c": 3}
