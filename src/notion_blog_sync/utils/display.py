"""
Rich Terminal Display Components.

Provides console UI for:
- A single status line with spinner while syncing
- The end-of-run summary
- Status messages
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from notion_blog_sync.core.models import SyncSummary


console = Console()


class ProgressDisplay:
    """
    Spinner with the current sync step.

    Example:
        with ProgressDisplay() as display:
            display.update("Fetching posts list")
    """

    def __init__(self) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self._task_id: Any = None

    def start(self, description: str = "Starting sync") -> None:
        """Start the progress display."""
        self.progress.start()
        self._task_id = self.progress.add_task(description, total=None)

    def update(self, description: str) -> None:
        """Replace the status line."""
        if self._task_id is not None:
            self.progress.update(self._task_id, description=description)

    def stop(self) -> None:
        """Stop the progress display."""
        if self._task_id is not None:
            self.progress.stop()
            self._task_id = None

    def __enter__(self) -> "ProgressDisplay":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()


def print_summary(summary: SyncSummary, markdown_dir: Path | str) -> None:
    """Print the written, skipped and unpublished posts of a run."""
    console.print(f"Markdown Posts available in [bold]{escape(str(markdown_dir))}[/bold]")

    if summary.skipped:
        table = Table(
            title=f"Total {len(summary.skipped)} Posts were Skipped",
            border_style="dim",
        )
        table.add_column("Title")
        for entry in summary.skipped:
            table.add_row(escape(entry.title))
        console.print(table)

    if summary.written:
        table = Table(
            title=f"Total {len(summary.written)} Posts were Written",
            border_style="green",
        )
        table.add_column("Title")
        table.add_column("Slug", style="cyan")
        for post in summary.written:
            table.add_row(escape(post.title), post.slug)
        console.print(table)

    if summary.unpublished:
        table = Table(
            title=f"Total {len(summary.unpublished)} Posts were Unpublished",
            border_style="yellow",
        )
        table.add_column("Title")
        for entry in summary.unpublished:
            table.add_row(escape(entry.title))
        console.print(table)

    console.print(f"[dim]Finished in {summary.duration_seconds:.1f}s[/dim]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red bold]Error:[/red bold] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow bold]⚠[/yellow bold] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")
