"""Release CLI Commands.

Provides commands for the release side of a pipeline:
- gate: evaluate the tag and release gates for the current commit
- tag: create (and optionally push) the release tag for a version
- should-build: token-driven build gate, exit code 1 means skip

Follows Commandments #4 (Small Functions) and #1 (Simple Control Flow).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.table import Table

from releaseforge.cli.console import get_console, safe_cli_command
from releaseforge.cli.options import (
    DebugOption,
    ForceReleaseOption,
    JsonOption,
    RootOption,
    load_cli_config,
    open_repository,
)
from releaseforge.core.config import Config
from releaseforge.core.env import get_env_branch
from releaseforge.core.git.repository import GitRepository
from releaseforge.core.release import TagPublisher
from releaseforge.core.versioning import (
    ReleaseDecision,
    ReleaseGateEvaluator,
    find_version,
    resolve_branch_name,
    should_build,
)

release_command = typer.Typer(help="Release gating and tagging commands")

MessageOption = typer.Option(
    None, "--message", "-m", help="Commit message (defaults to the last commit)"
)
BranchOption = typer.Option(
    None, "--branch", "-b", help="Branch name (defaults to the resolved branch)"
)


@release_command.command("gate")
@safe_cli_command("release gate")
def gate_command(
    ctx: typer.Context,
    project_root: Optional[Path] = RootOption,
    message: Optional[str] = MessageOption,
    branch: Optional[str] = BranchOption,
    force_release: bool = ForceReleaseOption,
    json_output: bool = JsonOption,
    debug: bool = DebugOption,
) -> None:
    """Evaluate the tag and release gates."""
    config = load_cli_config(ctx, project_root)
    decision, branch_name = _evaluate(config, message, branch, force_release)

    if json_output:
        payload = {"branch": branch_name, **decision.to_dict()}
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title="Release Gates")
    table.add_column("Gate", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Branch", branch_name)
    table.add_row("Branch allowed", _yes_no(decision.branch_allowed))
    table.add_row("Release commit", _yes_no(decision.is_release_commit))
    table.add_row("Should tag", _yes_no(decision.should_tag))
    table.add_row("Should release", _yes_no(decision.should_release))
    get_console().print(table)


@release_command.command("tag")
@safe_cli_command("release tag")
def tag_command(
    ctx: typer.Context,
    version_string: str = typer.Argument(..., help="Version to tag, e.g. 1.3.0"),
    project_root: Optional[Path] = RootOption,
    push: Optional[bool] = typer.Option(
        None, "--push/--no-push", help="Push the tag to the configured remote"
    ),
    force_release: bool = ForceReleaseOption,
    debug: bool = DebugOption,
) -> None:
    """Create the release tag when the tag gate is open."""
    version = find_version(version_string)
    if version is None:
        get_console().print(f"[red]No version found in: {version_string}[/red]")
        raise typer.Exit(1)

    config = load_cli_config(ctx, project_root)
    repository = open_repository(config)
    decision, _ = _evaluate(config, None, None, force_release, repository)

    result = TagPublisher(repository, config.release).publish(
        version, decision, push=push
    )
    console = get_console()
    if not result.tagged:
        console.print(f"[yellow]Not tagging {result.tag}: {result.reason}[/yellow]")
    elif not result.created:
        console.print(f"[yellow]Tag {result.tag} already exists[/yellow]")
    else:
        pushed = " and pushed" if result.pushed else ""
        console.print(f"[green]Created tag {result.tag}{pushed}[/green]")


@release_command.command("should-build")
@safe_cli_command("release should-build")
def should_build_command(
    ctx: typer.Context,
    project_root: Optional[Path] = RootOption,
    message: Optional[str] = MessageOption,
    tokens: Optional[List[str]] = typer.Option(
        None, "--token", "-t", help="Required token (repeatable)"
    ),
    any_token: Optional[bool] = typer.Option(
        None, "--any/--all", help="Proceed on any token instead of all"
    ),
    force: bool = typer.Option(False, "--force", help="Always proceed"),
    debug: bool = DebugOption,
) -> None:
    """Exit 0 when the build should proceed, 1 when it should be skipped."""
    config = load_cli_config(ctx, project_root)
    gate = config.build_gate

    if message is None:
        message = open_repository(config).commit_message()

    result = should_build(
        message,
        tokens if tokens else gate.required_tokens,
        any_token=gate.any_token if any_token is None else any_token,
        force=force or config.overrides.force_build,
    )
    if result.proceed:
        get_console().print(f"[green]Build proceeds: {result.reason}[/green]")
        return

    get_console().print(f"[yellow]Build skipped: {result.reason}[/yellow]")
    raise typer.Exit(1)


# Helper functions


def _evaluate(
    config: Config,
    message: Optional[str],
    branch: Optional[str],
    force_release: bool,
    repository: Optional[GitRepository] = None,
) -> Tuple[ReleaseDecision, str]:
    """Evaluate the gates, querying git for whatever was not given."""
    if message is None or branch is None:
        repository = repository or open_repository(config)
    if message is None:
        message = repository.commit_message()
    if branch is None:
        branch = resolve_branch_name(
            repository, get_env_branch(), default=config.release.main_branch
        )

    evaluator = ReleaseGateEvaluator(config.release)
    decision = evaluator.evaluate(
        message, branch, force_release or config.overrides.force_release
    )
    return decision, branch


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"
