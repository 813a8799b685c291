"""Translate GitHub payloads into domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from forkprune.domain.model import Branch, PullRequest

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import PullRequestNode, RefNode


def translate_branches(
    nodes: Iterable[RefNode],
    *,
    repository: str,
    default_branch: str | None,
) -> list[Branch]:
    return [
        Branch(name=node.name, repository=repository)
        for node in nodes
        if node.name != default_branch
    ]


def translate_pull_request(node: PullRequestNode) -> PullRequest:
    return PullRequest(
        number=node.number,
        title=node.title,
        url=node.url,
        state=node.state,
    )


def select_pull_request(
    nodes: Iterable[PullRequestNode],
    *,
    head_repository: str,
) -> PullRequest | None:
    """Pick the newest pull request whose head lives in ``head_repository``.

    Branch names are only unique per fork, so the upstream search can return pull
    requests opened from other people's forks.
    """

    wanted = head_repository.casefold()
    for node in nodes:
        if node.head_repository is None:
            # head fork was deleted; cannot tell whose branch it was
            continue
        if node.head_repository.name_with_owner.casefold() == wanted:
            return translate_pull_request(node)
    return None
