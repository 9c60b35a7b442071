"""Console output helpers for CLI tools."""

import functools
import sys

import click
from rich.console import Console
from rich.markup import escape

# Status goes to stderr so stdout stays clean for tool output
console = Console(stderr=True)


def success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]✗[/red] {escape(message)}")


def handle_errors(func):
    """
    Decorator for CLI commands.

    Reports interrupts and unexpected exceptions instead of dumping a traceback.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (SystemExit, click.exceptions.ClickException, click.exceptions.Abort, click.exceptions.Exit):
            raise
        except KeyboardInterrupt:
            warning("Interrupted")
            sys.exit(130)
        except Exception as e:
            error(f"Unexpected error: {e}")
            sys.exit(1)

    return wrapper
