"""Domain types (pure, dependency-light)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class PullRequestState(StrEnum):
    OPEN = "OPEN"
    MERGED = "MERGED"
    CLOSED = "CLOSED"


@dataclass(frozen=True, slots=True)
class Branch:
    """A branch on the user's fork."""

    name: str
    repository: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class PullRequest:
    """A pull request against the upstream repository.

    Instances are hashable and compare by value, which makes them usable as keys
    of the reconciled ``{pull_request: branch_name}`` mapping.
    """

    number: int
    title: str
    url: str
    state: PullRequestState

    def __str__(self) -> str:
        return f"{self.title} ({self.url})"


@dataclass(frozen=True, slots=True)
class ForkBranches:
    """Branches of a fork, excluding its default branch."""

    repository_id: str
    default_branch: str
    branches: tuple[Branch, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.branches)
