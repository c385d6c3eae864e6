"""Release CLI Module."""

from releaseforge.cli.release.main import release_command

__all__ = ["release_command"]
