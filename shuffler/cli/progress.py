"""
Progress display for the command line.

Wraps Rich's Progress so the services only see the small reporter
interface (start / increment / finish), and provides a spinner for calls
of unknown duration.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)

DONE_MARK = "[green]✓[/green]"


class RichProgressReporter:
    """Progress bar advanced once per playlist item visited."""

    def __init__(self, console: Optional[Console] = None, *, disabled: bool = False) -> None:
        self.disabled = disabled
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            console=console,
            disable=disabled,
            expand=True,
        )
        self._task_id: Optional[TaskID] = None

    def start(self, total: int, message: str) -> None:
        self._task_id = self._progress.add_task(f"[ ] {message}", total=total)
        self._progress.start()

    def increment(self) -> None:
        if self._task_id is not None:
            self._progress.advance(self._task_id)

    def finish(self, message: str) -> None:
        if self._task_id is None:
            return
        self._progress.update(self._task_id, description=f"[{DONE_MARK}] {message}")
        self._progress.stop()
        self._task_id = None


@contextmanager
def spinner(
    message: str,
    finish_message: str,
    console: Optional[Console] = None,
    *,
    disabled: bool = False,
) -> Generator[None, None, None]:
    """
    Show a spinner while the block runs, then a check mark and
    ``finish_message`` if it completed.

    Example:
        >>> with spinner("Creating new playlist...", "Created playlist"):
        ...     service.create_shuffled_playlist(name, description)
    """
    progress = Progress(
        TextColumn("{task.description}"),
        SpinnerColumn(),
        console=console,
        disable=disabled,
        transient=True,
    )
    progress.add_task(message, total=None)

    with progress:
        yield

    if not disabled:
        (console or progress.console).print(f"[{DONE_MARK}] {finish_message}")
