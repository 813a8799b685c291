from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import TYPE_CHECKING

import pytest

from forkprune.domain.model import Branch, ForkBranches, PullRequest, PullRequestState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence

FORK = "octocat/winget-pkgs"

type Outcome = PullRequest | Exception | None


class FakeRepositoryHost:
    """In-memory repository host recording every call made against it."""

    def __init__(
        self,
        pull_requests: Mapping[str, Outcome],
        *,
        branches: Sequence[str] | None = None,
        delays: Mapping[str, float] | None = None,
        username: str = "octocat",
        repository_id: str = "R_fork",
        default_branch: str = "master",
        username_error: Exception | None = None,
        listing_error: Exception | None = None,
        delete_error: Exception | None = None,
    ) -> None:
        self._pull_requests = dict(pull_requests)
        self._branches = list(branches) if branches is not None else list(pull_requests)
        self._delays = dict(delays or {})
        self.username = username
        self.repository_id = repository_id
        self.default_branch = default_branch
        self._username_error = username_error
        self._listing_error = listing_error
        self._delete_error = delete_error
        self.resolve_calls: list[tuple[str, str]] = []
        self.delete_calls: list[tuple[str, list[str]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def current_username(self) -> str:
        if self._username_error is not None:
            raise self._username_error
        return self.username

    async def list_fork_branches(self, username: str) -> ForkBranches:
        if self._listing_error is not None:
            raise self._listing_error
        return ForkBranches(
            repository_id=self.repository_id,
            default_branch=self.default_branch,
            branches=tuple(
                Branch(name=name, repository=f"{username}/winget-pkgs") for name in self._branches
            ),
        )

    async def resolve_pull_request(self, default_branch: str, branch: Branch) -> PullRequest | None:
        self.resolve_calls.append((default_branch, branch.name))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delays.get(branch.name, 0))
            outcome = self._pull_requests.get(branch.name)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1

    async def delete_branches(self, repository_id: str, branch_names: Sequence[str]) -> None:
        self.delete_calls.append((repository_id, list(branch_names)))
        if self._delete_error is not None:
            raise self._delete_error


class RecordingSelector:
    """Selector returning a fixed choice (or everything) and remembering what it was shown."""

    def __init__(
        self,
        choose: Callable[[list[PullRequest]], list[PullRequest]] | None = None,
    ) -> None:
        self._choose = choose
        self.shown: list[list[PullRequest]] = []

    def select(self, candidates: Sequence[PullRequest]) -> list[PullRequest]:
        offered = list(candidates)
        self.shown.append(offered)
        if self._choose is None:
            return offered
        return self._choose(offered)


class RecordingProgress:
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    @contextmanager
    def resolving(self, total: int, *, label: str) -> Iterator[None]:
        self.events.append(("resolving", (total, label)))
        yield
        self.events.append(("resolved", None))

    def advance(self, branch: Branch) -> None:
        self.events.append(("advance", branch.name))

    @contextmanager
    def deleting(self, count: int) -> Iterator[None]:
        self.events.append(("deleting", count))
        yield


def make_pull_request(
    number: int,
    state: PullRequestState = PullRequestState.MERGED,
    *,
    title: str | None = None,
) -> PullRequest:
    return PullRequest(
        number=number,
        title=title or f"New version: Example.Package {number}",
        url=f"https://github.com/microsoft/winget-pkgs/pull/{number}",
        state=state,
    )


@pytest.fixture
def pull_request() -> Callable[..., PullRequest]:
    return make_pull_request


@pytest.fixture
def fake_host() -> type[FakeRepositoryHost]:
    return FakeRepositoryHost


@pytest.fixture
def recording_selector() -> type[RecordingSelector]:
    return RecordingSelector


@pytest.fixture
def recording_progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def fork_branch() -> Callable[[str], Branch]:
    def factory(name: str) -> Branch:
        return Branch(name=name, repository=FORK)

    return factory
