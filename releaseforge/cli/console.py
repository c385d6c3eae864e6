"""Console output helpers.

Command output (tables, versions, JSON) goes to stdout; errors and logs
go to stderr so that `releaseforge version compute --json` stays
machine-readable.
"""

from __future__ import annotations

import traceback
from functools import wraps
from typing import Any, Callable, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from releaseforge.core.exceptions import ReleaseForgeError, get_root_cause
from releaseforge.core.logging import get_logger

logger = get_logger(__name__)

_console: Optional[Console] = None
_err_console: Optional[Console] = None

# Set by the --verbose flag
_verbose_mode: bool = False


def get_console() -> Console:
    """Get shared stdout console instance (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_err_console() -> Console:
    """Get shared stderr console instance (lazy-loaded)."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def set_verbose_mode(enabled: bool) -> None:
    """Enable or disable tracebacks in error output."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


class ErrorRenderer:
    """Renders error messages with "Why" and "How to fix" sections.

    Example
    -------
        try:
            engine.run()
        except ReleaseForgeError as e:
            ErrorRenderer.render(e, context="While computing the version")
            raise typer.Exit(1)
    """

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        """Render an exception as an error panel on stderr.

        Args:
            exc: Exception to render
            context: Optional context line (e.g., "During version compute")
            show_traceback: Override for verbose mode (None = use global setting)
        """
        if isinstance(exc, ReleaseForgeError):
            error_code = exc.error_code
            why = exc.why_it_happened
            how_to_fix = exc.how_to_fix
        else:
            error_code = ReleaseForgeError.error_code
            why = f"Unexpected {type(exc).__name__}"
            how_to_fix = ["Run with --verbose or --debug for the full traceback"]

        root_cause = get_root_cause(exc)
        root_message = str(root_cause) if root_cause is not exc else None

        content = ErrorRenderer._build_error_content(
            message=str(exc),
            context=context,
            why=why,
            how_to_fix=how_to_fix,
            root_message=root_message,
        )
        console = get_err_console()
        console.print(
            Panel(
                content,
                title=f"[bold red]Error: {error_code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        should_show_traceback = (
            show_traceback if show_traceback is not None else is_verbose_mode()
        )
        if should_show_traceback:
            tb_text = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
            console.print("[dim]--- Traceback ---[/dim]")
            console.print(tb_text, markup=False, highlight=False)

    @staticmethod
    def _build_error_content(
        message: str,
        context: str,
        why: str,
        how_to_fix: List[str],
        root_message: Optional[str],
    ) -> Text:
        text = Text()

        if context:
            text.append(f"{context}\n\n", style="dim")

        text.append(message, style="bold red")
        text.append("\n\n")

        if root_message and root_message != message:
            text.append("Root cause: ", style="bold yellow")
            text.append(root_message, style="yellow")
            text.append("\n\n")

        text.append("Why it happened:\n", style="bold cyan")
        text.append(f"  {why}\n\n", style="cyan")

        text.append("How to fix:\n", style="bold green")
        for fix in how_to_fix:
            text.append(f"  - {fix}\n", style="green")

        return text


def _handle_cli_error(e: Exception, operation_name: str, show_debug: bool) -> None:
    """
    Handle CLI error with user-friendly formatting.

    JPL Rule #4: <40 lines.
    JPL Rule #9: Full type hints.

    Args:
        e: The exception that occurred
        operation_name: Human-readable operation name
        show_debug: Whether to show technical details
    """
    ErrorRenderer.render(
        e,
        context=f"During {operation_name}",
        show_traceback=True if show_debug else None,
    )
    logger.error(f"[{operation_name}] {type(e).__name__}: {e}")


def safe_cli_command(
    operation_name: str,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to wrap CLI commands with user-friendly error handling.

    typer.Exit raised by the command passes through unchanged; any other
    exception is rendered and turned into exit code 1.

    Args:
        operation_name: Human-readable operation name for error context

    Returns:
        Decorator function that wraps the command with error handling
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except Exception as e:
                show_debug = bool(kwargs.get("debug", False))
                _handle_cli_error(e, operation_name, show_debug)
                raise typer.Exit(code=1)

        return wrapper

    return decorator
