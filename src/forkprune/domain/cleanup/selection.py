"""Selection strategies deciding which reconciled branches get deleted."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from forkprune.domain.model import PullRequest


class SelectionCancelledError(RuntimeError):
    """Raised when the operator aborts the selection prompt."""


@runtime_checkable
class BranchSelector(Protocol):
    """Confirm which pull requests' branches should be deleted."""

    def select(self, candidates: Sequence[PullRequest]) -> list[PullRequest]: ...


class SelectAll:
    """Non-interactive selector: every candidate is confirmed as-is."""

    def select(self, candidates: Sequence[PullRequest]) -> list[PullRequest]:
        return list(candidates)


if TYPE_CHECKING:
    _selector_check: BranchSelector = SelectAll()
