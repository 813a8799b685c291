"""Rich progress rendering for cleanup runs."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from forkprune.domain.model import Branch


class RichCleanupProgress:
    """Progress bar while pull requests are resolved, spinner while deleting."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    @contextmanager
    def resolving(self, total: int, *, label: str) -> Iterator[None]:
        progress = Progress(
            SpinnerColumn(style="green"),
            TextColumn("{task.description}"),
            TimeElapsedColumn(),
            BarColumn(complete_style="cyan", finished_style="blue"),
            MofNCompleteColumn(),
            console=self._console,
            transient=True,
        )
        with progress:
            self._progress = progress
            self._task = progress.add_task(
                f"Retrieving branches that have a {label} pull request associated with them",
                total=total,
            )
            try:
                yield
            finally:
                self._progress = None
                self._task = None

    def advance(self, branch: Branch) -> None:
        del branch
        if self._progress is not None and self._task is not None:
            self._progress.advance(self._task)

    @contextmanager
    def deleting(self, count: int) -> Iterator[None]:
        noun = "branch" if count == 1 else "branches"
        with self._console.status(f"Deleting {count} selected {noun}", spinner="dots"):
            yield
