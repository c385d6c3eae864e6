"""
Safe environment variable parsing with validation.

Provides typed readers for the environment variables ReleaseForge honours.
Only the configuration loader and the CLI read the environment; the
versioning engine receives every value as an explicit parameter.

Usage Pattern
-------------
Instead of ad-hoc comparisons scattered through the code:

    # Fragile - "TRUE", " true" and "1" all behave differently
    force = os.environ.get("FORCE_MAJOR") == "true"

Use the readers:

    from releaseforge.core.env import get_env_bool
    force = get_env_bool("FORCE_MAJOR")
"""

from __future__ import annotations

import os
from typing import FrozenSet, Mapping, Optional

from releaseforge.core.logging import get_logger

logger = get_logger(__name__)

# Whitelists for configuration values
VERSION_STRATEGIES: FrozenSet[str] = frozenset(["tag", "file"])
TAG_MODES: FrozenSet[str] = frozenset(["nearest", "latest"])
DEFAULT_BUMPS: FrozenSet[str] = frozenset(["patch", "none"])
FORCED_BUMPS: FrozenSet[str] = frozenset(["major", "minor", "patch"])
LOG_LEVELS: FrozenSet[str] = frozenset(
    ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
)

_TRUE_VALUES: FrozenSet[str] = frozenset(["true", "1", "yes", "on"])

# Branch variables exported by common CI systems, in lookup order
BRANCH_ENV_VARS = ("BRANCH_NAME", "GIT_BRANCH")


def get_env_str(
    name: str,
    default: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Get a stripped string from an environment variable.

    Empty or whitespace-only values are treated as unset.

    Args:
        name: Environment variable name.
        default: Value returned when the variable is unset or blank.
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Stripped value or default.
    """
    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_env_bool(
    name: str,
    default: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Get a boolean flag from an environment variable.

    Args:
        name: Environment variable name.
        default: Value returned when the variable is unset.
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        True for "true", "1", "yes" or "on" (case-insensitive), else False.

    Example:
        >>> get_env_bool("FORCE_RELEASE", environ={"FORCE_RELEASE": "TRUE"})
        True
    """
    value = get_env_str(name, environ=environ)
    if value is None:
        return default
    return value.lower() in _TRUE_VALUES


def get_env_whitelist(
    name: str,
    allowed: FrozenSet[str],
    default: Optional[str] = None,
    case_sensitive: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Get a value from an environment variable, validated against a whitelist.

    Args:
        name: Environment variable name.
        allowed: Set of accepted values.
        default: Value returned when unset or not in the whitelist.
        case_sensitive: Compare case-sensitively. Values are lower-cased otherwise.
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The accepted value or default.
    """
    value = get_env_str(name, environ=environ)
    if value is None:
        return default

    candidate = value if case_sensitive else value.lower()
    if candidate not in allowed:
        logger.warning(
            f"Ignoring {name}={value}: not one of {', '.join(sorted(allowed))}"
        )
        return default
    return candidate


def get_env_branch(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the branch name exported by the CI system, if any."""
    for name in BRANCH_ENV_VARS:
        value = get_env_str(name, environ=environ)
        if value:
            return value
    return None
