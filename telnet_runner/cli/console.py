"""Console, logging and progress display for the telnet runner.

Log records are printed through Rich above a live progress bar that stays at
the bottom of the screen while a batch of sessions runs. Sessions run in worker
threads, so every display update happens under one reentrant lock.
"""

from __future__ import annotations

import logging
import threading

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

console = Console()

progress_lock = threading.RLock()
progress = Progress(
    SpinnerColumn(),
    TextColumn("[bold blue]{task.description}"),
    BarColumn(),
    MofNCompleteColumn(),
    TimeElapsedColumn(),
    console=console,
    expand=True,
)
live_display = Live(progress, console=console, auto_refresh=False)

# Totals of the progress tasks that have not been completed yet
_active_tasks: dict[TaskID, int] = {}


class LiveDisplayHandler(RichHandler):
    """Rich handler that keeps log output above the live progress bar."""

    def emit(self, record: logging.LogRecord) -> None:
        with progress_lock:
            super().emit(record)
            if live_display.is_started:
                live_display.refresh()


logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[LiveDisplayHandler(console=console, rich_tracebacks=True)],
    force=True,
)

log = logging.getLogger("telnet_runner")


def set_verbosity(verbose: int) -> None:
    """Set the package log level from a -v count.

    Args:
        verbose: 0 for warnings only, 1 for info, 2 or more for debug
    """
    if verbose >= 2:  # noqa: PLR2004
        log.setLevel("DEBUG")
    elif verbose == 1:
        log.setLevel("INFO")
    else:
        log.setLevel("WARNING")


def create_progress(description: str, total: int) -> TaskID:
    """Add a progress bar, starting the live display if needed.

    Returns:
        The task to pass to update_progress and complete_progress
    """
    with progress_lock:
        if not live_display.is_started:
            live_display.start()
        task_id = progress.add_task(description, total=total)
        _active_tasks[task_id] = total
        live_display.refresh()
        return task_id


def update_progress(task_id: TaskID, description: str) -> None:
    """Advance a progress bar by one step."""
    with progress_lock:
        if task_id not in _active_tasks:
            log.warning("Attempted to update non-existent progress task: %s", task_id)
            return
        progress.update(task_id, advance=1, description=description)
        live_display.refresh()


def complete_progress(task_id: TaskID, description: str) -> None:
    """Fill a progress bar and stop the live display once nothing is running."""
    with progress_lock:
        if task_id not in _active_tasks:
            log.warning("Attempted to complete non-existent progress task: %s", task_id)
            return
        total = _active_tasks.pop(task_id)
        progress.update(task_id, completed=total, description=description)
        live_display.refresh()
        if not _active_tasks and live_display.is_started:
            live_display.stop()
