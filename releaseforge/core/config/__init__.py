"""
Configuration Management for ReleaseForge.

All configuration classes and the loading function are re-exported here:

    from releaseforge.core.config import Config, load_config
    from releaseforge.core.config import VersioningConfig, ReleaseConfig

Architecture
------------
    config/
    ├── versioning.py    # VersioningConfig
    ├── release.py       # ReleaseConfig, BuildGateConfig
    ├── overrides.py     # ForceOptions
    └── config.py        # Main Config class
"""

from releaseforge.core.config.config import Config
from releaseforge.core.config.overrides import ForceOptions
from releaseforge.core.config.release import BuildGateConfig, ReleaseConfig
from releaseforge.core.config.versioning import VersioningConfig
from releaseforge.core.config_loaders import (
    CONFIG_FILENAMES,
    apply_env_overrides,
    expand_env_vars,
    load_config,
)

__all__ = [
    "Config",
    "VersioningConfig",
    "ReleaseConfig",
    "BuildGateConfig",
    "ForceOptions",
    "CONFIG_FILENAMES",
    "load_config",
    "apply_env_overrides",
    "expand_env_vars",
]
