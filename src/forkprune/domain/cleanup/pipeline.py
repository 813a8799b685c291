"""Discovery, reconciliation, selection and deletion of stale fork branches."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .deletion import delete_selected
from .resolver import resolve_pull_requests

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from forkprune.domain.model import Branch, PullRequest
    from forkprune.domain.policy import MergeStatePolicy
    from forkprune.domain.ports.hosting import RepositoryHost

    from .resolver import ReconciledBranches
    from .selection import BranchSelector

log = getLogger(__name__)


class CleanupProgress(Protocol):
    """Hooks for rendering the long-running parts of a cleanup run."""

    def resolving(self, total: int, *, label: str) -> AbstractContextManager[object]: ...

    def advance(self, branch: Branch) -> None: ...

    def deleting(self, count: int) -> AbstractContextManager[object]: ...


@dataclass(slots=True)
class CleanupResult:
    """Outcome of a cleanup run."""

    policy_label: str
    reconciled: ReconciledBranches = field(default_factory=dict)
    selected: list[PullRequest] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


async def run_cleanup(
    host: RepositoryHost,
    *,
    policy: MergeStatePolicy,
    selector: BranchSelector,
    concurrency: int,
    progress: CleanupProgress | None = None,
) -> CleanupResult:
    """Find fork branches with a terminal pull request and delete the confirmed ones.

    Listing failures and deletion failures propagate. When nothing qualifies the run
    ends early without prompting or deleting.
    """

    username = await host.current_username()
    fork = await host.list_fork_branches(username)
    log.info(
        "Checking %s branches of %s's fork for %s pull requests",
        len(fork),
        username,
        policy.label,
    )

    resolving = (
        progress.resolving(len(fork), label=policy.label) if progress is not None else nullcontext()
    )
    with resolving:
        reconciled = await resolve_pull_requests(
            host,
            fork.branches,
            default_branch=fork.default_branch,
            policy=policy,
            concurrency=concurrency,
            on_progress=progress.advance if progress is not None else None,
        )

    result = CleanupResult(policy_label=policy.label, reconciled=reconciled)
    if not reconciled:
        log.info("There are no %s pull requests with branches that can be deleted", policy.label)
        return result

    # blocks on operator input in interactive mode; nothing else is in flight here
    result.selected = selector.select(list(reconciled))

    deleting = (
        progress.deleting(len(result.selected))
        if progress is not None and result.selected
        else nullcontext()
    )
    with deleting:
        result.deleted = await delete_selected(
            host,
            fork.repository_id,
            reconciled,
            result.selected,
        )
    return result
