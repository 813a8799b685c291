"""Public interface for the GitHub adapter."""

from __future__ import annotations

from .client import GitHubAPIError, GitHubClient
from .translator import select_pull_request, translate_branches, translate_pull_request

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "select_pull_request",
    "translate_branches",
    "translate_pull_request",
]
