"""Version CLI Commands.

Provides CLI commands for computing, previewing and displaying the
semantic version of the checked-out commit.

JPL Power of Ten Compliance:
- Rule #1: No recursion
- Rule #4: All functions < 60 lines
- Rule #7: Check all return values
- Rule #9: Complete type hints
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from releaseforge.cli.console import get_console, safe_cli_command
from releaseforge.cli.options import (
    CumulativePatchOption,
    DebugOption,
    DefaultBumpOption,
    EnvOutputOption,
    ForceBumpOption,
    ForceMajorOption,
    ForceMinorOption,
    ForcePatchOption,
    ForceReleaseOption,
    JsonOption,
    OutputOption,
    RootOption,
    StrategyOption,
    TagModeOption,
    build_force_options,
    load_cli_config,
    open_repository,
)
from releaseforge.core.env import get_env_branch, get_env_str
from releaseforge.core.exceptions import GitError
from releaseforge.core.logging import get_logger
from releaseforge.core.versioning import (
    SemanticVersion,
    TextArtifact,
    VersionEngine,
    VersionResult,
    find_version,
    resolve_current_version,
)

logger = get_logger(__name__)
version_command = typer.Typer(help="Version computation commands")


@version_command.command("compute")
@safe_cli_command("version compute")
def compute_version(
    ctx: typer.Context,
    project_root: Optional[Path] = RootOption,
    strategy: Optional[str] = StrategyOption,
    tag_mode: Optional[str] = TagModeOption,
    default_bump: Optional[str] = DefaultBumpOption,
    force_bump: Optional[str] = ForceBumpOption,
    force_major: bool = ForceMajorOption,
    force_minor: bool = ForceMinorOption,
    force_patch: bool = ForcePatchOption,
    force_release: bool = ForceReleaseOption,
    cumulative_patch: Optional[bool] = CumulativePatchOption,
    json_output: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    env_output: Optional[Path] = EnvOutputOption,
    debug: bool = DebugOption,
) -> None:
    """Compute the next version and persist it.

    Writes the version file and records the commit in the state file.
    Running it again on the same commit returns the same version.
    """
    result = _run_engine(
        ctx,
        project_root,
        strategy=strategy,
        tag_mode=tag_mode,
        default_bump=default_bump,
        cumulative_patch=cumulative_patch,
        force_flags=(force_bump, force_major, force_minor, force_patch, force_release),
        dry_run=False,
    )
    _emit_result(result, json_output, output, env_output)


@version_command.command("next")
@safe_cli_command("version next")
def next_version(
    ctx: typer.Context,
    project_root: Optional[Path] = RootOption,
    strategy: Optional[str] = StrategyOption,
    tag_mode: Optional[str] = TagModeOption,
    default_bump: Optional[str] = DefaultBumpOption,
    force_bump: Optional[str] = ForceBumpOption,
    force_major: bool = ForceMajorOption,
    force_minor: bool = ForceMinorOption,
    force_patch: bool = ForcePatchOption,
    force_release: bool = ForceReleaseOption,
    cumulative_patch: Optional[bool] = CumulativePatchOption,
    json_output: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    env_output: Optional[Path] = EnvOutputOption,
    debug: bool = DebugOption,
) -> None:
    """Preview the next version without writing any file."""
    result = _run_engine(
        ctx,
        project_root,
        strategy=strategy,
        tag_mode=tag_mode,
        default_bump=default_bump,
        cumulative_patch=cumulative_patch,
        force_flags=(force_bump, force_major, force_minor, force_patch, force_release),
        dry_run=True,
    )
    _emit_result(result, json_output, output, env_output)


@version_command.command("show")
@safe_cli_command("version show")
def show_version(
    ctx: typer.Context,
    project_root: Optional[Path] = RootOption,
    silent: bool = typer.Option(
        False, "--silent", "-s", help="Print only the version string"
    ),
) -> None:
    """Display the current version.

    Resolution order: BUILD_VERSION, the version file, the nearest tag,
    then 0.0.0.
    """
    config = load_cli_config(ctx, project_root)
    file_text = TextArtifact(config.version_file_path).read_line()

    nearest: Optional[str] = None
    try:
        nearest = open_repository(config).nearest_tag(config.versioning.tag_pattern)
    except GitError as e:
        logger.warning("Tag lookup failed", error=e)

    version, source = resolve_current_version(
        get_env_str("BUILD_VERSION"), file_text, nearest
    )
    if silent:
        typer.echo(str(version))
        return

    table = Table(title="Current Version")
    table.add_column("Component", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", str(version))
    table.add_row("Source", source)
    table.add_row("Version file", file_text or "-")
    table.add_row("Nearest tag", nearest or "-")
    get_console().print(table)


@version_command.command("validate")
def validate_version(
    version_string: str = typer.Argument(
        ...,
        help="Version string to validate",
    ),
) -> None:
    """Check that a string contains a MAJOR.MINOR.PATCH version.

    Rule #4: Function < 60 lines.
    """
    parsed = find_version(version_string)
    console = get_console()

    if parsed is None:
        console.print(f"[red]No version found in: {version_string}[/red]")
        console.print("Expected a MAJOR.MINOR.PATCH triple, e.g. v1.2.3")
        raise typer.Exit(1)

    console.print(f"[green]Valid version: {parsed}[/green]")
    _display_version_components(parsed)


# Helper functions (JPL Rule #4: Keep functions small)


def _run_engine(
    ctx: typer.Context,
    project_root: Optional[Path],
    *,
    strategy: Optional[str],
    tag_mode: Optional[str],
    default_bump: Optional[str],
    cumulative_patch: Optional[bool],
    force_flags: tuple,
    dry_run: bool,
) -> VersionResult:
    """Load config, apply CLI overrides and run the engine once."""
    config = load_cli_config(
        ctx,
        project_root,
        strategy=strategy,
        tag_mode=tag_mode,
        default_bump=default_bump,
        cumulative_patch=cumulative_patch,
    )
    force_bump, force_major, force_minor, force_patch, force_release = force_flags
    overrides = build_force_options(
        config,
        force_bump=force_bump,
        force_major=force_major,
        force_minor=force_minor,
        force_patch=force_patch,
        force_release=force_release,
    )
    engine = VersionEngine(config, open_repository(config))
    return engine.run(overrides, env_branch=get_env_branch(), dry_run=dry_run)


def _emit_result(
    result: VersionResult,
    json_output: bool,
    output: Optional[Path],
    env_output: Optional[Path],
) -> None:
    """Print the result and write the requested hand-off files."""
    payload = json.dumps(result.to_dict(), indent=2)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
    if env_output:
        env_output.parent.mkdir(parents=True, exist_ok=True)
        env_output.write_text("\n".join(result.to_env()) + "\n", encoding="utf-8")

    if json_output:
        typer.echo(payload)
    else:
        _display_result(result)


def _display_result(result: VersionResult) -> None:
    """Display a version result in a table.

    Args:
        result: VersionResult to display.
    """
    title = "Next Version (dry run)" if result.dry_run else "Version"
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Version", str(result.version))
    table.add_row("Base version", f"{result.base_version} ({result.baseline_source.value})")
    table.add_row("Bump", result.bump.value + (" (forced)" if result.forced_bump else ""))
    if result.cumulative_patch:
        table.add_row("Commits since tag", str(result.commits_since_tag))
    table.add_row("Branch", result.branch)
    table.add_row("Should tag", _yes_no(result.should_tag))
    table.add_row("Release", _yes_no(result.is_release))
    if result.skipped:
        table.add_row("Skipped", "commit already processed")

    get_console().print(table)


def _display_version_components(version: SemanticVersion) -> None:
    """Display version components.

    Args:
        version: SemanticVersion to display.
    """
    table = Table(title="Version Components")
    table.add_column("Component", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Major", str(version.major))
    table.add_row("Minor", str(version.minor))
    table.add_row("Patch", str(version.patch))

    get_console().print(table)


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"
