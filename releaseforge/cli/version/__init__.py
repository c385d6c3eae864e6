"""Version CLI Module."""

from releaseforge.cli.version.main import version_command

__all__ = ["version_command"]
