"""Cleanup run defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import env_flag
from .errors import ConfigurationError


def default_concurrency() -> int:
    """Number of concurrent GitHub calls when none is requested explicitly."""

    return os.cpu_count() or 1


@dataclass(frozen=True, slots=True)
class CleanupConfig:
    concurrent_calls: int = field(default_factory=default_concurrency)
    automatic: bool = False
    only_merged: bool = False
    only_closed: bool = False


def get_cleanup_config(
    *,
    concurrent_calls: int | None = None,
    automatic: bool = False,
    only_merged: bool = False,
    only_closed: bool = False,
) -> CleanupConfig:
    if concurrent_calls is not None and concurrent_calls < 1:
        raise ConfigurationError("Concurrent calls must be a positive integer")
    return CleanupConfig(
        concurrent_calls=concurrent_calls or default_concurrency(),
        automatic=automatic or env_flag("CI"),
        only_merged=only_merged,
        only_closed=only_closed,
    )
