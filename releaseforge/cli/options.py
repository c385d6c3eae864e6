"""Shared CLI options and helpers.

Option objects are reused across commands so `version compute` and
`version next` accept exactly the same flags.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from releaseforge.core.config import Config, ForceOptions, load_config
from releaseforge.core.git.repository import GitRepository
from releaseforge.core.logging import configure_logging

RootOption = typer.Option(
    None, "--root", "-r", help="Repository root (defaults to the current directory)"
)
StrategyOption = typer.Option(None, "--strategy", help="Baseline source: tag or file")
TagModeOption = typer.Option(
    None, "--tag-mode", help="Tag selection: nearest or latest"
)
DefaultBumpOption = typer.Option(
    None, "--default-bump", help="Bump without a token: patch or none"
)
ForceBumpOption = typer.Option(
    None, "--force-bump", help="Force a bump: major, minor or patch"
)
ForceMajorOption = typer.Option(False, "--force-major", help="Force a major bump")
ForceMinorOption = typer.Option(False, "--force-minor", help="Force a minor bump")
ForcePatchOption = typer.Option(False, "--force-patch", help="Force a patch bump")
ForceReleaseOption = typer.Option(
    False, "--force-release", help="Force the release (and tag) gate open"
)
CumulativePatchOption = typer.Option(
    None,
    "--cumulative-patch/--no-cumulative-patch",
    help="Set patch to the commit count since the nearest tag",
)
JsonOption = typer.Option(False, "--json", help="Print the result as JSON")
OutputOption = typer.Option(
    None, "--output", "-o", help="Write the JSON result to this file"
)
EnvOutputOption = typer.Option(
    None, "--env-output", help="Write KEY=value lines to this file"
)
DebugOption = typer.Option(False, "--debug", help="Show tracebacks on error")


def get_config_path(ctx: Optional[typer.Context]) -> Optional[Path]:
    """Config file path given to the top-level --config option."""
    if ctx is None or not isinstance(ctx.obj, dict):
        return None
    return ctx.obj.get("config_path")


def is_verbose(ctx: Optional[typer.Context]) -> bool:
    if ctx is None or not isinstance(ctx.obj, dict):
        return False
    return bool(ctx.obj.get("verbose"))


def load_cli_config(
    ctx: Optional[typer.Context],
    root: Optional[Path],
    **versioning_overrides: Any,
) -> Config:
    """Load configuration for a command and apply CLI overrides.

    Precedence: CLI options > env vars > YAML file > defaults. Overrides
    that are None are ignored; the rest are re-validated.

    Args:
        ctx: Typer context carrying the --config path.
        root: Repository root option.
        **versioning_overrides: VersioningConfig fields to replace.

    Returns:
        Loaded Config.

    Raises:
        ConfigValidationError: If the file or an override is invalid.
    """
    base_path = (root or Path.cwd()).resolve()
    config = load_config(get_config_path(ctx), base_path)

    changes: Dict[str, Any] = {
        key: value for key, value in versioning_overrides.items() if value is not None
    }
    if changes:
        config.versioning = replace(config.versioning, **changes)

    if not is_verbose(ctx):
        configure_logging(level=config.log_level)
    return config


def build_force_options(
    config: Config,
    force_bump: Optional[str] = None,
    force_major: bool = False,
    force_minor: bool = False,
    force_patch: bool = False,
    force_release: bool = False,
) -> ForceOptions:
    """Merge CLI force flags onto the configured overrides.

    Flags only switch an override on. An explicit --force-bump replaces
    the configured force_bump.
    """
    base = config.overrides
    return ForceOptions(
        force_bump=force_bump or base.force_bump,
        force_major=base.force_major or force_major,
        force_minor=base.force_minor or force_minor,
        force_patch=base.force_patch or force_patch,
        force_release=base.force_release or force_release,
        force_build=base.force_build,
    )


def open_repository(config: Config) -> GitRepository:
    """GitRepository rooted at the configured base path."""
    return GitRepository(
        config.base_path,
        user_name=config.release.git_user_name,
        user_email=config.release.git_user_email,
    )
