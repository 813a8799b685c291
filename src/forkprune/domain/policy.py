"""Merge-state policy deciding which pull requests make a branch cleanable."""

from __future__ import annotations

from dataclasses import dataclass

from .model import PullRequestState


@dataclass(frozen=True, slots=True)
class MergeStatePolicy:
    states: frozenset[PullRequestState]
    label: str

    @classmethod
    def from_flags(cls, *, only_merged: bool, only_closed: bool) -> MergeStatePolicy:
        """Derive the policy from the two narrowing flags.

        Exactly one flag set narrows to that state. Both or neither fall back to
        accepting every terminal state.
        """

        if only_merged and not only_closed:
            return cls(frozenset({PullRequestState.MERGED}), "merged")
        if only_closed and not only_merged:
            return cls(frozenset({PullRequestState.CLOSED}), "closed")
        return cls(
            frozenset({PullRequestState.MERGED, PullRequestState.CLOSED}),
            "merged or closed",
        )

    def accepts(self, state: PullRequestState) -> bool:
        return state in self.states

    def __str__(self) -> str:
        return self.label
