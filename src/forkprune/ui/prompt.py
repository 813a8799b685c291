"""Interactive multi-selection of branches to delete."""

from __future__ import annotations

import re
import signal
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from forkprune.domain.cleanup.selection import SelectionCancelledError
from forkprune.domain.model import PullRequestState

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from typing import TextIO

    from forkprune.domain.cleanup.selection import BranchSelector
    from forkprune.domain.model import PullRequest

SELECT_TITLE = "Please select branches to delete"
SELECT_HINT = (
    "[dim]Toggle entries by number or range (e.g. [bold]2 4-6[/bold]), "
    "[bold]a[/bold] selects all, [bold]n[/bold] selects none, "
    "Enter confirms, [bold]q[/bold] aborts[/dim]"
)

_STATE_STYLES = {
    PullRequestState.MERGED: "magenta",
    PullRequestState.CLOSED: "red",
    PullRequestState.OPEN: "green",
}
_TOKEN_SEPARATORS = re.compile(r"[\s,]+")


@contextmanager
def interruptible_prompt() -> Iterator[None]:
    """Let Ctrl+C raise ``KeyboardInterrupt`` while waiting for input.

    The CLI exits on SIGINT; at the prompt an interrupt cancels the selection instead.
    """

    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)


def parse_toggles(command: str, count: int) -> list[int]:
    """Parse ``"1 3-5"`` into zero-based indices, validating against ``count``."""

    indices: list[int] = []
    for token in _TOKEN_SEPARATORS.split(command.strip()):
        if not token:
            continue
        start_text, sep, end_text = token.partition("-")
        try:
            start = int(start_text)
            end = int(end_text) if sep else start
        except ValueError:
            raise ValueError(f"Not a number or range: {token!r}") from None
        if start > end:
            start, end = end, start
        if start < 1 or end > count:
            raise ValueError(f"Entry {token} is out of range 1-{count}")
        indices.extend(range(start - 1, end))
    return indices


class InteractiveSelector:
    """Let the operator confirm branches, with every entry pre-selected."""

    def __init__(self, *, console: Console | None = None, stream: TextIO | None = None) -> None:
        self._console = console or Console()
        self._stream = stream

    def select(self, candidates: Sequence[PullRequest]) -> list[PullRequest]:
        chosen = [True] * len(candidates)
        while True:
            self._render(candidates, chosen)
            try:
                with interruptible_prompt():
                    answer = Prompt.ask(
                        "Selection",
                        console=self._console,
                        default="",
                        show_default=False,
                        stream=self._stream,
                    )
            except (KeyboardInterrupt, EOFError) as exc:
                raise SelectionCancelledError("Branch selection cancelled") from exc

            command = answer.strip().lower()
            if not command:
                return [candidate for candidate, keep in zip(candidates, chosen) if keep]
            if command in {"q", "quit"}:
                raise SelectionCancelledError("Branch selection cancelled")
            if command in {"a", "all"}:
                chosen = [True] * len(candidates)
                continue
            if command in {"n", "none"}:
                chosen = [False] * len(candidates)
                continue

            try:
                toggled = parse_toggles(command, len(candidates))
            except ValueError as exc:
                self._console.print(f"[red]{exc}[/red]")
                continue
            for index in toggled:
                chosen[index] = not chosen[index]

    def _render(self, candidates: Sequence[PullRequest], chosen: Sequence[bool]) -> None:
        table = Table(
            title=SELECT_TITLE,
            box=box.MINIMAL_HEAVY_HEAD,
            header_style="bold white",
            border_style="grey50",
            pad_edge=False,
        )
        table.add_column("#", style="cyan", justify="right")
        table.add_column("", justify="center")
        table.add_column("Pull request", style="green")
        table.add_column("State")
        for number, (candidate, keep) in enumerate(zip(candidates, chosen), start=1):
            style = _STATE_STYLES[candidate.state]
            table.add_row(
                str(number),
                "[bold green]x[/bold green]" if keep else " ",
                str(candidate),
                f"[{style}]{candidate.state.value.lower()}[/{style}]",
            )
        self._console.print(table)
        self._console.print(SELECT_HINT)


if TYPE_CHECKING:
    _selector_check: BranchSelector = InteractiveSelector()
