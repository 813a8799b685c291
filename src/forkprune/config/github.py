"""GitHub configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from forkprune import __version__

from .env import optional_env_var, require_env_var
from .errors import ConfigurationError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy

GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT_SECONDS = 30.0
DEFAULT_UPSTREAM = "microsoft/winget-pkgs"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Holds GitHub API configuration values."""

    token: str
    upstream_owner: str
    upstream_name: str
    resilience: ResilienceConfig
    mutation_resilience: ResilienceConfig

    @property
    def upstream(self) -> str:
        return f"{self.upstream_owner}/{self.upstream_name}"


def parse_repository_slug(value: str) -> tuple[str, str]:
    """Split ``owner/name`` into its parts."""

    owner, sep, name = value.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigurationError(f"Invalid repository {value!r}, expected OWNER/NAME")
    return owner, name


def _resilience(token: str, *, name: str, retry: RetryPolicy) -> ResilienceConfig:
    return ResilienceConfig(
        name=name,
        base_url=GITHUB_API_URL,
        timeout_seconds=GITHUB_TIMEOUT_SECONDS,
        retry=retry,
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        default_headers={
            "Authorization": f"bearer {token}",
            "User-Agent": f"forkprune/{__version__}",
        },
    )


def get_github_config(
    *,
    token: str | None = None,
    upstream: str | None = None,
) -> GitHubConfig:
    """Build the GitHub configuration, falling back to the environment for missing values."""

    resolved_token = token.strip() if token and token.strip() else require_env_var("GITHUB_TOKEN")
    owner, name = parse_repository_slug(
        upstream or optional_env_var("FORKPRUNE_UPSTREAM") or DEFAULT_UPSTREAM
    )
    return GitHubConfig(
        token=resolved_token,
        upstream_owner=owner,
        upstream_name=name,
        resilience=_resilience(resolved_token, name="github", retry=RetryPolicy()),
        mutation_resilience=_resilience(resolved_token, name="github-mutations", retry=NO_RETRY),
    )
