"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for spinners, colored output and formatted text.
Supports verbosity levels and the --no-color flag. It is also the
prompter behind the reconciler's ConfirmationGate.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from roster_sync.reconciler.models import SyncReport


class OutputHandler:
    """Handles all terminal output using Rich library.

    Provides methods for displaying messages, spinners, confirmation
    prompts and summaries with color coding and verbosity level control.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Fetching groups..."):
        ...     # Do work
        ...     pass
    """

    def __init__(
        self,
        verbosity: int = 0,
        no_color: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            console: Optional Rich console (mainly for tests)
        """
        self.verbosity = verbosity
        self.console = console or Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Args:
            message: Message to display with spinner

        Yields:
            None
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def show_confirmation(self, prompt: str, lines: Sequence[str]) -> None:
        """Render a confirmation heading and the affected items.

        Args:
            prompt: Heading describing the phase
            lines: One formatted line per affected item ("N/A" if none)
        """
        self.console.print(f"\n[bold]{escape(prompt)}:[/bold]")
        for line in lines:
            self.console.print(f"  • {escape(line)}")

    def ask(self, question: str) -> str:
        """Read one answer from the terminal.

        Args:
            question: Question shown before the cursor

        Returns:
            Raw answer as typed
        """
        return self.console.input(f"{escape(question)}: ")

    def print_dryrun_banner(self) -> None:
        """Announce that no change will be applied."""
        self.console.print("[bold yellow]WhatIf: previewing changes, nothing will be applied[/bold yellow]")

    def print_sync_summary(self, report: SyncReport, dry_run: bool = False) -> None:
        """Display the sync summary with color coding.

        Args:
            report: Outcome of the sync run
            dry_run: True if the run only previewed changes
        """
        if dry_run:
            self.console.print("\n[bold]Dry Run - Changes Preview:[/bold]")
            self.console.print(f"  [green]+[/green] Would invite: {len(report.planned_adds)} user(s)")
            self.console.print(f"  [red]-[/red] Would delete: {len(report.planned_deletes)} user(s)")
            self.console.print(f"  [blue]↔[/blue] Would move: {len(report.planned_moves)} user(s)")
            if not report.has_changes:
                self.console.print("\n[green]Already in sync. No changes to apply.[/green]")
            return

        self.console.print("\n[bold]Sync Summary:[/bold]")

        if report.invited:
            self.console.print(f"  [green]+[/green] Invited: {len(report.invited)} user(s)")

        if report.deleted:
            self.console.print(f"  [red]-[/red] Deleted: {len(report.deleted)} user(s)")

        if report.created_groups:
            self.console.print(
                f"  [green]+[/green] Created group(s): {escape(', '.join(report.created_groups))}"
            )

        if report.moved:
            self.console.print(f"  [blue]↔[/blue] Moved: {len(report.moved)} user(s)")

        for phase in report.skipped_phases:
            self.console.print(f"  [yellow]⊘[/yellow] Skipped: {phase} phase")

        # Overall status
        if not report.has_changes:
            self.console.print("\n[green]Already in sync. No changes detected.[/green]")
        elif report.skipped_phases:
            self.console.print("\n[yellow]Sync completed with skipped phases[/yellow]")
        else:
            self.console.print("\n[green]Sync completed successfully[/green]")
