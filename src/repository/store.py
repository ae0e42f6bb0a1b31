"""Abstract repository store interface.

This module defines the read-only contract every store backend implements.
RepositoryModel only talks to a store through these methods, so the commit
graph can be built from the ostree CLI or from an in-memory fixture alike.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import CommitMetadata, Signature


class RepositoryStore(ABC):
    """Abstract content-addressed commit store.

    All methods are synchronous and read-only.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Location of the opened repository."""
        pass

    @abstractmethod
    def open(self) -> None:
        """Check that the path holds a recognized store.

        Raises:
            RepoOpenError: If the path is not a repository
        """
        pass

    @abstractmethod
    def list_branch_refs(self) -> set[str]:
        """Return all ref names. Order is unspecified."""
        pass

    @abstractmethod
    def resolve_head(self, name: str) -> str:
        """Resolve a ref to its head commit hash.

        Raises:
            NotFoundError: If the ref does not exist
        """
        pass

    @abstractmethod
    def load_commit_metadata(self, commit_hash: str) -> CommitMetadata:
        """Load the metadata of one commit object.

        Raises:
            CorruptObjectError: If the object is missing or unreadable
        """
        pass

    @abstractmethod
    def verify_signatures(self, commit_hash: str) -> list[Signature]:
        """Return the verification result of each signature on a commit.

        An unsigned commit yields an empty list. A failed verification is
        reported as a Signature with valid=False, never raised.
        """
        pass

    def retain_commits(self, hashes: set[str]) -> None:
        """Drop any per-commit state not listed in *hashes*.

        Called after every successful refresh with the commits of the new
        graph. Stores without caches keep the default no-op.
        """
        pass
