"""
Main configuration class for ReleaseForge.

This module provides the Config dataclass that aggregates all sub-configs
and handles validation and dictionary (YAML) parsing.

Configuration Hierarchy
-----------------------
    Config
    ├── VersioningConfig   # Baseline sources, bump tokens, version/state files
    ├── ReleaseConfig      # Release/tag tokens, branch restriction, tag publisher
    ├── BuildGateConfig    # Tokens required for a build to proceed
    └── ForceOptions       # Forced bump / release / build overrides

Environment Variables
---------------------
String values may reference the environment with ${VAR_NAME} syntax:

    release:
      main_branch: ${RELEASE_BRANCH:main}   # with default

Usage Example
-------------
    config = load_config()
    strategy = config.versioning.strategy
    token = config.release.release_token
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from releaseforge.core.config.overrides import ForceOptions
from releaseforge.core.config.release import BuildGateConfig, ReleaseConfig
from releaseforge.core.config.versioning import VersioningConfig
from releaseforge.core.env import LOG_LEVELS
from releaseforge.core.exceptions import ConfigValidationError
from releaseforge.core.logging import get_logger

logger = get_logger(__name__)

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


@dataclass
class Config:
    """Main ReleaseForge configuration."""

    versioning: VersioningConfig = field(default_factory=VersioningConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    build_gate: BuildGateConfig = field(default_factory=BuildGateConfig)
    overrides: ForceOptions = field(default_factory=ForceOptions)
    log_level: str = "INFO"

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        assert isinstance(
            self.versioning, VersioningConfig
        ), "versioning must be VersioningConfig"
        assert isinstance(self.release, ReleaseConfig), "release must be ReleaseConfig"
        assert isinstance(self.overrides, ForceOptions), "overrides must be ForceOptions"

        self.log_level = str(self.log_level).strip().upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log_level: '{self.log_level}'. "
                f"Valid options: {', '.join(sorted(LOG_LEVELS))}"
            )

    @property
    def base_path(self) -> Path:
        """Repository root all relative paths resolve against."""
        return self._base_path

    @property
    def version_file_path(self) -> Path:
        """Absolute path of the persisted version file."""
        return self._resolve(self.versioning.version_file)

    @property
    def state_file_path(self) -> Path:
        """Absolute path of the last-processed-commit state file."""
        return self._resolve(self.versioning.state_file)

    def _resolve(self, value: str) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path
        return self._base_path / path

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(
        cls_type: Any, data: Optional[Dict[str, Any]], section: str
    ) -> Dict[str, Any]:
        """Filter dict to dataclass fields, coercing string booleans.

        Unknown keys are dropped with a warning so a typo does not silently
        fall back to a default.
        """
        if not data:
            return {}
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Section '{section}' must be a mapping")

        field_types = {f.name: f.type for f in fields(cls_type)}
        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in field_types:
                logger.warning("Ignoring unknown config key", key=f"{section}.{key}")
                continue
            if field_types[key] is bool and isinstance(value, str):
                value = _parse_bool(f"{section}.{key}", value)
            result[key] = value
        return result

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from releaseforge.core.config_loaders import expand_env_vars

        data = expand_env_vars(data or {})

        config = cls(
            versioning=VersioningConfig(
                **cls._filter_fields(
                    VersioningConfig, data.get("versioning"), "versioning"
                )
            ),
            release=ReleaseConfig(
                **cls._filter_fields(ReleaseConfig, data.get("release"), "release")
            ),
            build_gate=BuildGateConfig(
                **cls._filter_fields(
                    BuildGateConfig, data.get("build_gate"), "build_gate"
                )
            ),
            overrides=ForceOptions(
                **cls._filter_fields(ForceOptions, data.get("overrides"), "overrides")
            ),
            log_level=data.get("log_level", "INFO"),
        )

        if base_path:
            config._base_path = base_path

        return config


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ConfigValidationError(f"Invalid boolean for {key}: '{value}'")
