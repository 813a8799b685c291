"""GraphQL documents sent to the GitHub API."""

from __future__ import annotations

# all-zero object id: setting a ref to it deletes the ref
NULL_OBJECT_ID = "0" * 40

BRANCH_PAGE_SIZE = 100
PULL_REQUEST_PAGE_SIZE = 25

GET_CURRENT_USER = """
query GetCurrentUser {
  viewer {
    login
  }
}
"""

GET_BRANCHES = """
query GetBranches($owner: String!, $name: String!, $first: Int!, $cursor: String) {
  repository(owner: $owner, name: $name) {
    id
    nameWithOwner
    defaultBranchRef {
      name
    }
    refs(first: $first, after: $cursor, refPrefix: "refs/heads/") {
      nodes {
        name
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

GET_PULL_REQUEST_FROM_BRANCH = """
query GetPullRequestFromBranch(
  $owner: String!
  $name: String!
  $baseRefName: String!
  $headRefName: String!
  $first: Int!
  $cursor: String
) {
  repository(owner: $owner, name: $name) {
    pullRequests(
      first: $first
      after: $cursor
      baseRefName: $baseRefName
      headRefName: $headRefName
      orderBy: {field: CREATED_AT, direction: DESC}
    ) {
      nodes {
        number
        title
        url
        state
        headRepository {
          nameWithOwner
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

DELETE_REFS = """
mutation DeleteRefs($repositoryId: ID!, $refUpdates: [RefUpdate!]!) {
  updateRefs(input: {repositoryId: $repositoryId, refUpdates: $refUpdates}) {
    clientMutationId
  }
}
"""
