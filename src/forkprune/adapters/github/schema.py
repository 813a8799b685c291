"""Pydantic models describing the GitHub GraphQL payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from forkprune.domain.model import PullRequestState  # noqa: TC001


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLError(GitHubBaseModel):
    message: str
    type: str | None = None


class GraphQLEnvelope(GitHubBaseModel):
    errors: list[GraphQLError] = Field(default_factory=list["GraphQLError"])


### viewer ###


class Viewer(GitHubBaseModel):
    login: str


class ViewerData(GitHubBaseModel):
    viewer: Viewer


class ViewerResponse(GraphQLEnvelope):
    data: ViewerData | None = None


### branches ###


class RefNode(GitHubBaseModel):
    name: str


class PageInfo(GitHubBaseModel):
    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class RefConnection(GitHubBaseModel):
    nodes: list[RefNode] = Field(default_factory=list["RefNode"])
    page_info: PageInfo = Field(alias="pageInfo")


class DefaultBranchRef(GitHubBaseModel):
    name: str


class BranchesRepository(GitHubBaseModel):
    id: str
    name_with_owner: str = Field(alias="nameWithOwner")
    default_branch_ref: DefaultBranchRef | None = Field(default=None, alias="defaultBranchRef")
    refs: RefConnection


class BranchesData(GitHubBaseModel):
    repository: BranchesRepository | None = None


class BranchesResponse(GraphQLEnvelope):
    data: BranchesData | None = None


### pull requests ###


class HeadRepository(GitHubBaseModel):
    name_with_owner: str = Field(alias="nameWithOwner")


class PullRequestNode(GitHubBaseModel):
    number: int
    title: str
    url: str
    state: PullRequestState
    head_repository: HeadRepository | None = Field(default=None, alias="headRepository")


class PullRequestConnection(GitHubBaseModel):
    nodes: list[PullRequestNode] = Field(default_factory=list["PullRequestNode"])
    page_info: PageInfo = Field(
        default_factory=lambda: PageInfo(has_next_page=False),
        alias="pageInfo",
    )


class PullRequestsRepository(GitHubBaseModel):
    pull_requests: PullRequestConnection = Field(alias="pullRequests")


class PullRequestsData(GitHubBaseModel):
    repository: PullRequestsRepository | None = None


class PullRequestsResponse(GraphQLEnvelope):
    data: PullRequestsData | None = None


### deletion ###


class UpdateRefsPayload(GitHubBaseModel):
    client_mutation_id: str | None = Field(default=None, alias="clientMutationId")


class DeleteRefsData(GitHubBaseModel):
    update_refs: UpdateRefsPayload | None = Field(default=None, alias="updateRefs")


class DeleteRefsResponse(GraphQLEnvelope):
    data: DeleteRefsData | None = None
