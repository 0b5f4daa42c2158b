"""Console output helpers for the CLI."""

from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Formats messages for the terminal using Rich."""

    def __init__(
        self,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            quiet: Suppress informational output (errors are always shown)
            console: Console for regular output
            err_console: Console for errors and warnings
        """
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: Any = "") -> None:
        """Print a plain message."""
        if not self.quiet:
            self.console.print(message)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self.quiet:
            self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.quiet:
            self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self.err_console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message."""
        self.err_console.print(f"[red]Error:[/red] {message}")

    def table(self, title: str, columns: list[str], rows: list[list[str]]) -> None:
        """Print rows as a table.

        Args:
            title: Table title
            columns: Column headers
            rows: Table rows, one list of cell strings per row
        """
        if self.quiet:
            return
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
