"""Application configuration helpers."""

from __future__ import annotations

from .cleanup import CleanupConfig, default_concurrency, get_cleanup_config
from .env import env_flag, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .github import (
    DEFAULT_UPSTREAM,
    GitHubConfig,
    get_github_config,
    parse_repository_slug,
)
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging

__all__ = [
    "DEFAULT_UPSTREAM",
    "NO_RETRY",
    "CleanupConfig",
    "ConfigurationError",
    "GitHubConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "default_concurrency",
    "env_flag",
    "get_cleanup_config",
    "get_github_config",
    "optional_env_var",
    "parse_repository_slug",
    "require_env_var",
    "require_env_vars",
]
