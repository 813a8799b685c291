"""Fork branch cleanup pipeline."""

from __future__ import annotations

from .deletion import branches_for_selection, delete_selected
from .pipeline import CleanupProgress, CleanupResult, run_cleanup
from .resolver import ReconciledBranches, resolve_pull_requests
from .selection import BranchSelector, SelectAll, SelectionCancelledError

__all__ = [
    "BranchSelector",
    "CleanupProgress",
    "CleanupResult",
    "ReconciledBranches",
    "SelectAll",
    "SelectionCancelledError",
    "branches_for_selection",
    "delete_selected",
    "resolve_pull_requests",
    "run_cleanup",
]
