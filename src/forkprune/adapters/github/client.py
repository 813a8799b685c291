"""GraphQL client for the GitHub API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx

from forkprune.adapters.http_resilience import ResilientClient
from forkprune.domain.model import ForkBranches
from forkprune.domain.ports.hosting import RepositoryHostError

from .queries import (
    BRANCH_PAGE_SIZE,
    DELETE_REFS,
    GET_BRANCHES,
    GET_CURRENT_USER,
    GET_PULL_REQUEST_FROM_BRANCH,
    NULL_OBJECT_ID,
    PULL_REQUEST_PAGE_SIZE,
)
from .schema import (
    BranchesResponse,
    DeleteRefsResponse,
    GraphQLEnvelope,
    PullRequestsResponse,
    ViewerResponse,
)
from .translator import select_pull_request, translate_branches

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from forkprune.config.github import GitHubConfig
    from forkprune.config.http_resilience import ResilienceConfig
    from forkprune.domain.model import Branch, PullRequest

log = getLogger(__name__)

GRAPHQL_PATH = "/graphql"


class GitHubAPIError(RepositoryHostError):
    """Raised when a GitHub request fails or returns GraphQL errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Repository host backed by the GitHub GraphQL API.

    Reads share one HTTP session for the lifetime of the ``async with`` block, so
    concurrent pull request lookups reuse connections. Deletion uses a separate
    session configured without retries.
    """

    def __init__(
        self,
        *,
        config: GitHubConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._session: ResilientClient | None = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._session is not None:
            await self._session.aclose()
            self._session = None

    def _reader(self) -> ResilientClient:
        if self._session is None:
            self._session = self._client_factory(self._config.resilience)
        return self._session

    async def current_username(self) -> str:
        response = await self._execute(self._reader(), GET_CURRENT_USER, {}, ViewerResponse)
        if response.data is None:
            raise GitHubAPIError("GitHub did not return the authenticated user")
        return response.data.viewer.login

    async def list_fork_branches(self, username: str) -> ForkBranches:
        name = self._config.upstream_name
        branches: list[Branch] = []
        repository_id: str | None = None
        default_branch: str | None = None
        cursor: str | None = None

        while True:
            response = await self._execute(
                self._reader(),
                GET_BRANCHES,
                {"owner": username, "name": name, "first": BRANCH_PAGE_SIZE, "cursor": cursor},
                BranchesResponse,
            )
            repository = response.data.repository if response.data else None
            if repository is None:
                raise GitHubAPIError(
                    f"{username}/{name} does not exist, fork {self._config.upstream} first"
                )
            if repository.default_branch_ref is None:
                raise GitHubAPIError(f"{repository.name_with_owner} has no default branch")

            repository_id = repository.id
            default_branch = repository.default_branch_ref.name
            branches.extend(
                translate_branches(
                    repository.refs.nodes,
                    repository=repository.name_with_owner,
                    default_branch=default_branch,
                )
            )

            page_info = repository.refs.page_info
            if not page_info.has_next_page or page_info.end_cursor is None:
                break
            cursor = page_info.end_cursor

        log.debug("Found %s branches on %s/%s", len(branches), username, name)
        return ForkBranches(
            repository_id=repository_id,
            default_branch=default_branch,
            branches=tuple(branches),
        )

    async def resolve_pull_request(
        self,
        default_branch: str,
        branch: Branch,
    ) -> PullRequest | None:
        """Return the newest pull request opened from ``branch`` on the fork.

        Common branch names match pull requests from many forks, so pages are read
        until one from the fork turns up or the results run out.
        """

        cursor: str | None = None
        while True:
            try:
                response = await self._execute(
                    self._reader(),
                    GET_PULL_REQUEST_FROM_BRANCH,
                    {
                        "owner": self._config.upstream_owner,
                        "name": self._config.upstream_name,
                        "baseRefName": default_branch,
                        "headRefName": branch.name,
                        "first": PULL_REQUEST_PAGE_SIZE,
                        "cursor": cursor,
                    },
                    PullRequestsResponse,
                )
            except GitHubAPIError as exc:
                log.debug("Pull request lookup failed for %s: %s", branch.name, exc)
                raise

            repository = response.data.repository if response.data else None
            if repository is None:
                raise GitHubAPIError(f"{self._config.upstream} is not accessible")

            connection = repository.pull_requests
            pull_request = select_pull_request(
                connection.nodes,
                head_repository=branch.repository,
            )
            if pull_request is not None:
                return pull_request
            if not connection.page_info.has_next_page or connection.page_info.end_cursor is None:
                return None
            cursor = connection.page_info.end_cursor

    async def delete_branches(
        self,
        repository_id: str,
        branch_names: Sequence[str],
    ) -> None:
        if not branch_names:
            return
        ref_updates = [
            {"name": f"refs/heads/{name}", "afterOid": NULL_OBJECT_ID, "force": True}
            for name in branch_names
        ]
        async with self._client_factory(self._config.mutation_resilience) as client:
            response = await self._execute(
                client,
                DELETE_REFS,
                {"repositoryId": repository_id, "refUpdates": ref_updates},
                DeleteRefsResponse,
            )
        if response.data is None or response.data.update_refs is None:
            raise GitHubAPIError("GitHub did not confirm the branch deletion")

    async def _execute[T: GraphQLEnvelope](
        self,
        client: ResilientClient,
        query: str,
        variables: dict[str, Any],
        model: type[T],
    ) -> T:
        try:
            response = await client.post(
                GRAPHQL_PATH,
                json={"query": query, "variables": variables},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise GitHubAPIError(
                f"GitHub responded with HTTP {status}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub request failed: {exc}") from exc

        try:
            payload = model.model_validate(response.json())
        except ValueError as exc:
            raise GitHubAPIError("Unexpected GitHub response payload") from exc

        if payload.errors:
            message = "; ".join(error.message for error in payload.errors)
            log.debug("GitHub GraphQL error: %s", message)
            raise GitHubAPIError(message)
        return payload
