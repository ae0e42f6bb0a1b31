"""Projection of the commit graph onto the currently visible commits."""

from repository.models import CommitGraph, CommitRecord

from .visibility import BranchVisibilitySet

# Ordered commit hashes currently eligible for display
ViewSequence = tuple[str, ...]


def sort_key(commit: CommitRecord) -> tuple[float, str]:
    """Newest first; equal timestamps ordered by hash ascending."""
    return (-commit.timestamp.timestamp(), commit.hash)


def compute(graph: CommitGraph, visibility: BranchVisibilitySet) -> ViewSequence:
    """Select the commits reachable from a visible branch, newest first.

    Pure and deterministic: the same graph and visibility always give the
    same sequence. Recomputed in full on every call.
    """
    visible = visibility.visible_set()
    selected = [commit for commit in graph.values() if commit.branches & visible]
    selected.sort(key=sort_key)
    return tuple(commit.hash for commit in selected)
