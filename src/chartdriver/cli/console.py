"""Console output and error handling shared by CLI commands."""

from collections.abc import Callable
from functools import wraps

import typer
from rich.console import Console, ConsoleRenderable
from rich.panel import Panel

from chartdriver.errors import DeploymentError


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the CLI console."""
        self.console = console or Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def print_text(self, text: str) -> None:
        """Print text verbatim, without markup or highlighting."""
        self.console.out(text, highlight=False)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.error(f"[bold red]{message}[/bold red]")
        if details:
            self.console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)

    def print_header(self, title: str, style: str = "blue") -> None:
        """Print a styled header panel.

        Args:
            title: Header title text
            style: Border style color
        """
        self.console.print(
            Panel.fit(
                f"[bold {style}]{title}[/bold {style}]",
                border_style=style,
            )
        )

    def print_subheader(self, title: str) -> None:
        self.console.print(f"\n[bold underline]{title}[/bold underline]\n")


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Catches DeploymentError and Ctrl-C and formats them consistently.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except DeploymentError as e:
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
