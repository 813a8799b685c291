"""Batch deletion of the confirmed branches."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from forkprune.domain.model import PullRequest
    from forkprune.domain.ports.hosting import RepositoryHost

log = getLogger(__name__)


def branches_for_selection(
    reconciled: Mapping[PullRequest, str],
    selected: Iterable[PullRequest],
) -> list[str]:
    """Map selected pull requests back to branch names, skipping unknown keys."""

    return [reconciled[pull_request] for pull_request in selected if pull_request in reconciled]


async def delete_selected(
    host: RepositoryHost,
    repository_id: str,
    reconciled: Mapping[PullRequest, str],
    selected: Iterable[PullRequest],
) -> list[str]:
    """Delete the branches behind ``selected`` with a single host call.

    Returns the branch names that were sent for deletion. Nothing is sent when the
    selection is empty. Host failures propagate unchanged.
    """

    branch_names = branches_for_selection(reconciled, selected)
    if not branch_names:
        log.info("No branches selected for deletion")
        return []

    await host.delete_branches(repository_id, branch_names)
    log.info("Deleted %s branches", len(branch_names))
    return branch_names
