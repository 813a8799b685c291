from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003
from typing import Any

import httpx
import pytest

from forkprune.adapters.github import GitHubAPIError, GitHubClient
from forkprune.adapters.github.queries import NULL_OBJECT_ID, PULL_REQUEST_PAGE_SIZE
from forkprune.adapters.http_resilience import ResilienceConfig, ResilientClient
from forkprune.config.github import GitHubConfig, get_github_config
from forkprune.domain.model import Branch, PullRequest, PullRequestState

type Handler = Callable[[httpx.Request], httpx.Response]


class _Recorder:
    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[dict[str, Any]] = []
        self.sessions: list[str] = []

    def factory(self, resilience: ResilienceConfig) -> ResilientClient:
        async def async_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(json.loads(request.content))
            return self._handler(request)

        self.sessions.append(resilience.name)
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client


@pytest.fixture
def github_config() -> GitHubConfig:
    return get_github_config(token="ghp_test", upstream="microsoft/winget-pkgs")


def _graphql(
    data: dict[str, Any] | None,
    errors: list[dict[str, Any]] | None = None,
) -> httpx.Response:
    payload: dict[str, Any] = {"data": data}
    if errors is not None:
        payload["errors"] = errors
    return httpx.Response(200, json=payload)


def _call(
    github_config: GitHubConfig,
    handler: Handler,
    action: Callable[[GitHubClient], Any],
) -> tuple[Any, _Recorder]:
    recorder = _Recorder(handler)

    async def scenario() -> Any:
        async with GitHubClient(config=github_config, client_factory=recorder.factory) as client:
            return await action(client)

    return asyncio.run(scenario()), recorder


def _pull_request_node(
    number: int,
    state: str,
    head: str | None,
) -> dict[str, Any]:
    return {
        "number": number,
        "title": f"New version: Example.Package {number}",
        "url": f"https://github.com/microsoft/winget-pkgs/pull/{number}",
        "state": state,
        "headRepository": {"nameWithOwner": head} if head is not None else None,
    }


def _fork_branch(name: str) -> Branch:
    return Branch(name=name, repository="octocat/winget-pkgs")


def test_current_username_reads_viewer_login(github_config: GitHubConfig) -> None:
    username, recorder = _call(
        github_config,
        lambda request: _graphql({"viewer": {"login": "octocat"}}),
        lambda client: client.current_username(),
    )

    assert username == "octocat"
    assert "viewer" in recorder.requests[0]["query"]
    assert recorder.sessions == ["github"]


def test_list_fork_branches_pages_and_skips_default_branch(github_config: GitHubConfig) -> None:
    pages = [
        {
            "nodes": [{"name": "master"}, {"name": "feat-a"}],
            "pageInfo": {"hasNextPage": True, "endCursor": "cursor-1"},
        },
        {
            "nodes": [{"name": "feat-b"}],
            "pageInfo": {"hasNextPage": False, "endCursor": "cursor-2"},
        },
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        refs = pages.pop(0)
        return _graphql(
            {
                "repository": {
                    "id": "R_fork",
                    "nameWithOwner": "octocat/winget-pkgs",
                    "defaultBranchRef": {"name": "master"},
                    "refs": refs,
                }
            }
        )

    fork, recorder = _call(
        github_config, handler, lambda client: client.list_fork_branches("octocat")
    )

    assert fork.repository_id == "R_fork"
    assert fork.default_branch == "master"
    assert [branch.name for branch in fork.branches] == ["feat-a", "feat-b"]
    assert {branch.repository for branch in fork.branches} == {"octocat/winget-pkgs"}
    first, second = (request["variables"] for request in recorder.requests)
    assert first["owner"] == "octocat"
    assert first["name"] == "winget-pkgs"
    assert first["cursor"] is None
    assert second["cursor"] == "cursor-1"
    # one shared session for all reads
    assert recorder.sessions == ["github"]


def test_list_fork_branches_requires_existing_fork(github_config: GitHubConfig) -> None:
    with pytest.raises(GitHubAPIError, match="fork microsoft/winget-pkgs first"):
        _call(
            github_config,
            lambda request: _graphql({"repository": None}),
            lambda client: client.list_fork_branches("octocat"),
        )


def test_resolve_pull_request_keeps_pull_request_from_fork(github_config: GitHubConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _graphql(
            {
                "repository": {
                    "pullRequests": {
                        "nodes": [
                            _pull_request_node(11, "OPEN", "someone-else/winget-pkgs"),
                            _pull_request_node(12, "CLOSED", None),
                            _pull_request_node(10, "MERGED", "OctoCat/winget-pkgs"),
                        ]
                    }
                }
            }
        )

    pull_request, recorder = _call(
        github_config,
        handler,
        lambda client: client.resolve_pull_request("master", _fork_branch("feat-a")),
    )

    assert pull_request == PullRequest(
        number=10,
        title="New version: Example.Package 10",
        url="https://github.com/microsoft/winget-pkgs/pull/10",
        state=PullRequestState.MERGED,
    )
    variables = recorder.requests[0]["variables"]
    assert variables["owner"] == "microsoft"
    assert variables["name"] == "winget-pkgs"
    assert variables["baseRefName"] == "master"
    assert variables["headRefName"] == "feat-a"


def test_resolve_pull_request_without_match_returns_none(github_config: GitHubConfig) -> None:
    pull_request, _ = _call(
        github_config,
        lambda request: _graphql({"repository": {"pullRequests": {"nodes": []}}}),
        lambda client: client.resolve_pull_request("master", _fork_branch("feat-c")),
    )

    assert pull_request is None


def _paged_pull_requests(nodes: list[dict[str, Any]]) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content)["variables"]
        start = int(variables["cursor"] or 0)
        end = start + variables["first"]
        return _graphql(
            {
                "repository": {
                    "pullRequests": {
                        "nodes": nodes[start:end],
                        "pageInfo": {
                            "hasNextPage": end < len(nodes),
                            "endCursor": str(end),
                        },
                    }
                }
            }
        )

    return handler


def test_resolve_pull_request_pages_past_other_forks(github_config: GitHubConfig) -> None:
    crowd = [
        _pull_request_node(1000 + index, "OPEN", f"contributor-{index}/winget-pkgs")
        for index in range(PULL_REQUEST_PAGE_SIZE + 3)
    ]
    own = _pull_request_node(7, "MERGED", "octocat/winget-pkgs")

    pull_request, recorder = _call(
        github_config,
        _paged_pull_requests([*crowd, own]),
        lambda client: client.resolve_pull_request("master", _fork_branch("patch-1")),
    )

    assert pull_request is not None
    assert pull_request.number == 7
    assert pull_request.state is PullRequestState.MERGED
    cursors = [request["variables"]["cursor"] for request in recorder.requests]
    assert cursors == [None, str(PULL_REQUEST_PAGE_SIZE)]


def test_resolve_pull_request_stops_at_first_match(github_config: GitHubConfig) -> None:
    nodes = [
        _pull_request_node(number, "CLOSED", "octocat/winget-pkgs")
        for number in range(1, 2 * PULL_REQUEST_PAGE_SIZE + 1)
    ]

    pull_request, recorder = _call(
        github_config,
        _paged_pull_requests(nodes),
        lambda client: client.resolve_pull_request("master", _fork_branch("patch-1")),
    )

    assert pull_request is not None
    assert pull_request.number == 1
    assert len(recorder.requests) == 1


def test_resolve_pull_request_gives_up_after_last_page(github_config: GitHubConfig) -> None:
    crowd = [
        _pull_request_node(number, "MERGED", "someone-else/winget-pkgs")
        for number in range(PULL_REQUEST_PAGE_SIZE + 1)
    ]

    pull_request, recorder = _call(
        github_config,
        _paged_pull_requests(crowd),
        lambda client: client.resolve_pull_request("master", _fork_branch("patch-1")),
    )

    assert pull_request is None
    assert len(recorder.requests) == 2


def test_graphql_errors_raise_api_error(github_config: GitHubConfig) -> None:
    errors = [{"message": "API rate limit exceeded", "type": "RATE_LIMITED"}]

    with pytest.raises(GitHubAPIError, match="API rate limit exceeded"):
        _call(
            github_config,
            lambda request: _graphql(None, errors),
            lambda client: client.resolve_pull_request("master", _fork_branch("feat-a")),
        )


def test_http_status_errors_carry_status_code(github_config: GitHubConfig) -> None:
    with pytest.raises(GitHubAPIError) as excinfo:
        _call(
            github_config,
            lambda request: httpx.Response(502, text="Bad Gateway"),
            lambda client: client.current_username(),
        )

    assert excinfo.value.status_code == 502


def test_unexpected_payload_raises_api_error(github_config: GitHubConfig) -> None:
    with pytest.raises(GitHubAPIError, match="Unexpected GitHub response payload"):
        _call(
            github_config,
            lambda request: httpx.Response(200, text="<html>maintenance</html>"),
            lambda client: client.current_username(),
        )


def test_delete_branches_sends_one_mutation(github_config: GitHubConfig) -> None:
    _, recorder = _call(
        github_config,
        lambda request: _graphql({"updateRefs": {"clientMutationId": None}}),
        lambda client: client.delete_branches("R_fork", ["feat-a", "feat-b"]),
    )

    assert len(recorder.requests) == 1
    assert recorder.sessions == ["github-mutations"]
    request = recorder.requests[0]
    assert "updateRefs" in request["query"]
    assert request["variables"] == {
        "repositoryId": "R_fork",
        "refUpdates": [
            {"name": "refs/heads/feat-a", "afterOid": NULL_OBJECT_ID, "force": True},
            {"name": "refs/heads/feat-b", "afterOid": NULL_OBJECT_ID, "force": True},
        ],
    }


def test_delete_branches_with_nothing_to_delete_sends_nothing(
    github_config: GitHubConfig,
) -> None:
    _, recorder = _call(
        github_config,
        lambda request: _graphql({"updateRefs": {"clientMutationId": None}}),
        lambda client: client.delete_branches("R_fork", []),
    )

    assert recorder.requests == []


def test_delete_branches_requires_confirmation(github_config: GitHubConfig) -> None:
    with pytest.raises(GitHubAPIError, match="did not confirm"):
        _call(
            github_config,
            lambda request: _graphql({"updateRefs": None}),
            lambda client: client.delete_branches("R_fork", ["feat-a"]),
        )
