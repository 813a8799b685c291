"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from forkprune.adapters.github import GitHubClient
from forkprune.config import get_cleanup_config, get_github_config
from forkprune.domain.cleanup import SelectAll, run_cleanup
from forkprune.domain.policy import MergeStatePolicy
from forkprune.ui.progress import RichCleanupProgress
from forkprune.ui.prompt import InteractiveSelector

if TYPE_CHECKING:
    from forkprune.domain.cleanup import BranchSelector, CleanupProgress, CleanupResult
    from forkprune.domain.ports import RepositoryHost


log = getLogger(__name__)


def build_selector(automatic: bool) -> BranchSelector:  # noqa: FBT001
    """Pick the selection strategy once for the whole run."""

    if automatic:
        return SelectAll()
    return InteractiveSelector()


def cleanup_fork_branches(
    *,
    token: str | None = None,
    upstream: str | None = None,
    only_merged: bool = False,
    only_closed: bool = False,
    automatic: bool = False,
    concurrent_calls: int | None = None,
    host: RepositoryHost | None = None,
    selector: BranchSelector | None = None,
    progress: CleanupProgress | None = None,
) -> CleanupResult:
    """Delete fork branches whose pull request was merged or closed."""

    cleanup = get_cleanup_config(
        concurrent_calls=concurrent_calls,
        automatic=automatic,
        only_merged=only_merged,
        only_closed=only_closed,
    )
    policy = MergeStatePolicy.from_flags(
        only_merged=cleanup.only_merged,
        only_closed=cleanup.only_closed,
    )
    effective_selector = selector or build_selector(cleanup.automatic)
    effective_progress = progress or RichCleanupProgress()
    log.info(
        "Starting cleanup: policy=%s, concurrent_calls=%s, automatic=%s",
        policy.label,
        cleanup.concurrent_calls,
        cleanup.automatic,
    )

    if host is not None:
        return asyncio.run(
            run_cleanup(
                host,
                policy=policy,
                selector=effective_selector,
                concurrency=cleanup.concurrent_calls,
                progress=effective_progress,
            )
        )

    github_config = get_github_config(token=token, upstream=upstream)

    async def run_against_github() -> CleanupResult:
        async with GitHubClient(config=github_config) as client:
            return await run_cleanup(
                client,
                policy=policy,
                selector=effective_selector,
                concurrency=cleanup.concurrent_calls,
                progress=effective_progress,
            )

    return asyncio.run(run_against_github())
