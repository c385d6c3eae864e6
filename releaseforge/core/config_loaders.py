"""
Configuration Loading and Management Functions.

Handles loading the YAML configuration and applying environment overrides.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults.
CLI options are applied on top of the loaded Config by the CLI layer.
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional

import yaml

from releaseforge.core.env import (
    DEFAULT_BUMPS,
    FORCED_BUMPS,
    LOG_LEVELS,
    TAG_MODES,
    VERSION_STRATEGIES,
    get_env_bool,
    get_env_str,
    get_env_whitelist,
)
from releaseforge.core.exceptions import ConfigValidationError
from releaseforge.core.logging import get_logger

if TYPE_CHECKING:
    from releaseforge.core.config import Config

logger = get_logger(__name__)

CONFIG_FILENAMES = ("releaseforge.yaml", ".releaseforge.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles strings with ${VAR_NAME} or ${VAR_NAME:default} syntax inside
    nested dictionaries and lists.

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return _ENV_PATTERN.sub(replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def apply_env_overrides(
    config: "Config", environ: Optional[Mapping[str, str]] = None
) -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values. The FORCE_*
    flags only ever switch an override on; an unset variable leaves the
    configured value alone.

    Args:
        config: Configuration to update in place.
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The same Config object.
    """
    _apply_force_overrides(config, environ)
    _apply_versioning_overrides(config, environ)

    log_level = get_env_str("RELEASEFORGE_LOG_LEVEL", environ=environ)
    if log_level and log_level.upper() in LOG_LEVELS:
        config.log_level = log_level.upper()
    elif log_level:
        logger.warning(f"Ignoring RELEASEFORGE_LOG_LEVEL={log_level}: unknown level")
    return config


def _apply_force_overrides(
    config: "Config", environ: Optional[Mapping[str, str]]
) -> None:
    """Apply FORCE_* flags and RELEASEFORGE_FORCE_BUMP."""
    overrides = config.overrides

    forced = get_env_whitelist("RELEASEFORGE_FORCE_BUMP", FORCED_BUMPS, environ=environ)
    if forced:
        overrides.force_bump = forced

    if get_env_bool("FORCE_MAJOR", environ=environ):
        overrides.force_major = True
    if get_env_bool("FORCE_MINOR", environ=environ):
        overrides.force_minor = True
    if get_env_bool("FORCE_PATCH", environ=environ):
        overrides.force_patch = True
    if get_env_bool("FORCE_RELEASE", environ=environ):
        overrides.force_release = True
    if get_env_bool("FORCE_BUILD", environ=environ):
        overrides.force_build = True


def _apply_versioning_overrides(
    config: "Config", environ: Optional[Mapping[str, str]]
) -> None:
    """Apply whitelisted strategy, tag mode and default bump overrides."""
    versioning = config.versioning

    strategy = get_env_whitelist(
        "RELEASEFORGE_STRATEGY", VERSION_STRATEGIES, environ=environ
    )
    if strategy:
        versioning.strategy = strategy

    tag_mode = get_env_whitelist("RELEASEFORGE_TAG_MODE", TAG_MODES, environ=environ)
    if tag_mode:
        versioning.tag_mode = tag_mode

    default_bump = get_env_whitelist(
        "RELEASEFORGE_DEFAULT_BUMP", DEFAULT_BUMPS, environ=environ
    )
    if default_bump:
        versioning.default_bump = default_bump


def find_config_file(base_path: Path) -> Optional[Path]:
    """Return the first existing config file in base_path, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None,
    base_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to releaseforge.yaml in base_path.
        base_path: Repository root. Defaults to current directory.
        environ: Environment mapping for overrides. Defaults to os.environ.

    Returns:
        Config object with all settings.

    Raises:
        ConfigValidationError: If the file is not valid YAML or holds invalid values.
    """
    # Lazy import to avoid circular dependency
    from releaseforge.core.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        config_path = find_config_file(base_path)
    elif not config_path.exists():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    if config_path is None:
        logger.debug("No config file found, using defaults", base_path=base_path)
        config = Config()
        config._base_path = base_path
        return apply_env_overrides(config, environ)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a YAML mapping")

    logger.debug("Loaded config file", path=config_path)
    config = Config.from_dict(data, base_path)
    return apply_env_overrides(config, environ)
