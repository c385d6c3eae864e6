"""ReleaseForge CLI - Main application entry point.

Registers the `version` and `release` command groups and the global
--verbose / --version / --config options.

Follows Commandments #4 (Small Functions) and #1 (Simple Control Flow).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from releaseforge.cli.console import set_verbose_mode
from releaseforge.cli.release import release_command as release_app
from releaseforge.cli.version import version_command as version_app
from releaseforge.core.logging import configure_logging


# Version callback (Commandment #4: Small function)
def version_callback(value: bool) -> None:
    """Show version and exit.

    Args:
        value: True if --version flag provided
    """
    if value:
        from releaseforge import __version__

        typer.echo(f"ReleaseForge version {__version__}")
        raise typer.Exit()


def verbose_callback(value: bool) -> None:
    """Enable debug logging and tracebacks in error output.

    Args:
        value: True if --verbose flag provided
    """
    if value:
        configure_logging(level="DEBUG")
        set_verbose_mode(True)


# Create main Typer application
app = typer.Typer(
    name="releaseforge",
    help="Semantic version computation and release gating for CI pipelines",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        callback=verbose_callback,
        help="Enable debug logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to releaseforge.yaml",
    ),
) -> None:
    """ReleaseForge - semantic versioning and release gating."""
    ctx.obj = {"config_path": config, "verbose": verbose}

    # If no command provided, show help
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.add_typer(version_app, name="version", rich_help_panel="Versioning")
app.add_typer(release_app, name="release", rich_help_panel="Release")


def cli_main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()
