"""Port for the repository-hosting service that owns the fork."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from forkprune.domain.model import Branch, ForkBranches, PullRequest


class RepositoryHostError(RuntimeError):
    """Raised by repository-host adapters for transport, auth or API failures."""


@runtime_checkable
class RepositoryHost(Protocol):
    """Async contract consumed by the cleanup pipeline."""

    async def current_username(self) -> str: ...

    async def list_fork_branches(self, username: str) -> ForkBranches: ...

    async def resolve_pull_request(
        self,
        default_branch: str,
        branch: Branch,
    ) -> PullRequest | None:
        """Return the pull request opened from ``branch``, or ``None`` if there is none."""
        ...

    async def delete_branches(
        self,
        repository_id: str,
        branch_names: Sequence[str],
    ) -> None: ...
