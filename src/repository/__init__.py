"""Read-only access to an OSTree-style commit store.

Example:
    >>> from repository import RepositoryModel
    >>>
    >>> model = RepositoryModel.open("/srv/ostree/repo")
    >>> model.refresh()
    >>> model.branches()
    ['exampleos/x86_64/stable', 'exampleos/x86_64/testing']
"""

from .errors import (
    CorruptObjectError,
    NotFoundError,
    RepoOpenError,
    RepositoryError,
    UnknownBranchError,
)
from .factory import StoreType, create_store, get_store
from .memory import MemoryStore
from .model import RefreshWarning, RepositoryModel
from .models import Branch, CommitGraph, CommitMetadata, CommitRecord, Signature, to_json
from .ostree_cli import OstreeCliStore
from .store import RepositoryStore

__all__ = [
    # Model
    "RepositoryModel",
    "RefreshWarning",
    # Entities
    "Branch",
    "CommitGraph",
    "CommitMetadata",
    "CommitRecord",
    "Signature",
    "to_json",
    # Stores
    "RepositoryStore",
    "OstreeCliStore",
    "MemoryStore",
    "StoreType",
    "create_store",
    "get_store",
    # Exceptions
    "RepositoryError",
    "RepoOpenError",
    "NotFoundError",
    "CorruptObjectError",
    "UnknownBranchError",
]
