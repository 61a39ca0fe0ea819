"""Console output for the CLI.

Wraps rich so every command prints status lines and tables the same way.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.table import Table


class Console:
    """CLI output manager wrapping rich."""

    def __init__(self, *, force_terminal: bool | None = None) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def table(self, rows: list[tuple[str, Any]], *, title: str | None = None) -> None:
        """Print two-column key/value rows."""
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Setting")
        table.add_column("Value")
        for key, value in rows:
            table.add_row(key, str(value))
        self._console.print(table)


_console: Console | None = None


def get_console() -> Console:
    """Get the shared console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console
