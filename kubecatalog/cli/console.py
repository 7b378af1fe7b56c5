"""Console output for the CLI.

Wraps rich for consistent output. Entity documents go to stdout, so every
status message goes to stderr and can't corrupt a piped YAML stream.
"""

from typing import TYPE_CHECKING, Any

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from kubecatalog.domain.shared.model.diagnostic import TransformWarning


class Console:
    """CLI output manager wrapping rich."""

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
            quiet: Suppress non-essential output.
        """
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        if not self._quiet:
            self._err_console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {escape(message)}")
        if hint:
            self._err_console.print(f"  [dim]{escape(hint)}[/dim]")

    def warning(self, message: str) -> None:
        self._err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._err_console.print(f"[dim]{escape(message)}[/dim]")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to stdout (pass-through to rich)."""
        self._console.print(*args, **kwargs)

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold")
        for _, header in columns:
            table.add_column(header)
        for row in rows:
            table.add_row(*(str(row.get(key, "")) for key, _ in columns))
        self._console.print(table)

    def warnings(self, warnings: "list[TransformWarning]") -> None:
        """Print transform warnings to stderr, one line each."""
        for w in warnings:
            self._err_console.print(
                f"[yellow]⚠[/yellow] [bold]{escape(w.kind)}[/bold] {escape(w.resource)}: {escape(w.message)}"
            )
