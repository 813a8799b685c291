"""Bounded-concurrency resolution of fork branches to their pull requests."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from forkprune.domain.ports.hosting import RepositoryHostError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from forkprune.domain.model import Branch, PullRequest
    from forkprune.domain.policy import MergeStatePolicy
    from forkprune.domain.ports.hosting import RepositoryHost

log = getLogger(__name__)

type ReconciledBranches = dict[PullRequest, str]
type ProgressCallback = Callable[[Branch], None]


async def resolve_pull_requests(
    host: RepositoryHost,
    branches: Iterable[Branch],
    *,
    default_branch: str,
    policy: MergeStatePolicy,
    concurrency: int,
    on_progress: ProgressCallback | None = None,
) -> ReconciledBranches:
    """Map each branch to its pull request, keeping those accepted by ``policy``.

    At most ``concurrency`` lookups are in flight at once. Results are consumed in
    completion order, so the returned mapping reflects which lookups finished first
    rather than the order of ``branches``. Branches without a pull request, and
    branches whose lookup failed, are left out.
    """

    if concurrency < 1:
        raise ValueError("Concurrency must be at least 1")

    semaphore = asyncio.Semaphore(concurrency)

    async def resolve(branch: Branch) -> tuple[PullRequest | None, Branch]:
        async with semaphore:
            try:
                pull_request = await host.resolve_pull_request(default_branch, branch)
            except RepositoryHostError:
                pull_request = None
        return pull_request, branch

    reconciled: ReconciledBranches = {}
    lookups = [resolve(branch) for branch in branches]
    for finished in asyncio.as_completed(lookups):
        pull_request, branch = await finished
        if on_progress is not None:
            on_progress(branch)
        if pull_request is None or not policy.accepts(pull_request.state):
            continue
        reconciled[pull_request] = branch.name

    log.debug(
        "Resolved %s of %s branches to %s pull requests",
        len(reconciled),
        len(lookups),
        policy.label,
    )
    return reconciled
