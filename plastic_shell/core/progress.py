"""Progress reporting utilities for CLI commands.

Provides Rich-based progress bars for visual feedback while statuses are
collected from the cm shell.
"""

from collections.abc import Generator
from contextlib import contextmanager

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)


class RichProgressCallback:
    """Rich-based implementation of the ProgressCallback port."""

    def __init__(self, progress: Progress) -> None:
        """Initialize with a Rich Progress instance.

        Args:
            progress: Rich Progress instance to use for display.
        """
        self.progress = progress
        self.task_id: int | None = None

    def on_start(self, total: int, description: str) -> None:
        """Create progress bar when operation starts."""
        self.task_id = self.progress.add_task(description, total=total, current_item="")

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        """Update progress bar with the directory being processed."""
        if self.task_id is not None:
            self.progress.update(
                self.task_id, completed=current, current_item=item_description or ""
            )

    def on_complete(self) -> None:
        """Hide the progress bar."""
        if self.task_id is not None:
            self.progress.remove_task(self.task_id)
            self.task_id = None


@contextmanager
def progress_context(
    quiet_mode: bool = False,
) -> Generator[RichProgressCallback | None, None, None]:
    """Context manager for creating progress bars.

    Args:
        quiet_mode: If True, yields None (no progress reporting).

    Yields:
        RichProgressCallback if not quiet, None otherwise.
    """
    if quiet_mode:
        yield None
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("[cyan]{task.fields[current_item]}"),
            transient=True,
        ) as progress:
            yield RichProgressCallback(progress)
