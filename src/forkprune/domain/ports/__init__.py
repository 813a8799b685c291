"""Domain port definitions for adapters."""

from __future__ import annotations

from .hosting import RepositoryHost, RepositoryHostError

__all__ = ["RepositoryHost", "RepositoryHostError"]
