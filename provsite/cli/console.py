"""Shared Rich consoles for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from provsite.core.errors import ProvsiteError, SchemaValidationError

console = Console()
err_console = Console(stderr=True)


def print_error(exc: ProvsiteError) -> None:
    """Print a fatal error to stderr with enough detail to act on."""
    if isinstance(exc, SchemaValidationError):
        err_console.print(f"[bold red]Invalid manifest:[/bold red] {escape(exc.source)}")
        for path, message in exc.violations:
            err_console.print(f"  [cyan]{escape(path)}[/cyan]: {escape(message)}", highlight=False)
        return
    err_console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}", highlight=False)
