"""CLI progress display for sync operations.

This module provides a Rich-based SyncObserver that shows the directory
being walked and prints one line per transfer or deletion.
"""

from typing import Optional

from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn

from .output import OutputFormatter
from .sync.modes import SyncDirection
from .sync.observer import SyncObserver


class SyncProgressDisplay(SyncObserver):
    """Rich-based progress display for sync passes.

    Use as a context manager around ``push``/``pull`` so that the spinner
    is started and stopped with the pass.
    """

    def __init__(self, output: OutputFormatter, show_skips: bool = False):
        """Initialize the progress display.

        Args:
            output: Output formatter used for per-file lines
            show_skips: Also print a line for every skipped file
        """
        self.output = output
        self.show_skips = show_skips
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "SyncProgressDisplay":
        if not self.output.quiet:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.output.console,
                transient=True,
            )
            self._progress.start()
            self._task = self._progress.add_task("Connecting...", total=None)
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def on_directory(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, description=f"Scanning: {source}")

    def on_transfer(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        arrow = "↑" if direction is SyncDirection.PUSH else "↓"
        self.output.info(f"  {arrow} {source}")

    def on_skip(
        self, direction: SyncDirection, source: str, destination: str, reason: str
    ) -> None:
        if self.show_skips:
            self.output.info(f"  = {source} [dim]({reason})[/dim]")

    def on_delete(self, path: str, is_directory: bool) -> None:
        suffix = "/" if is_directory else ""
        self.output.info(f"  ✗ {path}{suffix}")

    def on_error(self, error: Exception, operation: str, path: str) -> None:
        # The CLI prints the error once the pass has aborted
        pass
