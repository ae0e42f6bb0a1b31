"""Factory for repository store backends.

Mirrors how the CLI picks a backend: `ostree` subprocess access by default,
or an empty in-memory store when `OSTREE_STORE=memory`.
"""

from enum import Enum
from pathlib import Path

from .memory import MemoryStore
from .ostree_cli import OstreeCliStore
from .store import RepositoryStore


class StoreType(str, Enum):
    """Supported store backends."""

    CLI = "cli"
    MEMORY = "memory"


def create_store(store_type: StoreType | str, path: str | Path) -> RepositoryStore:
    """Create a store backend for *path*.

    Raises:
        ValueError: If the store type is unsupported
    """
    if isinstance(store_type, str):
        try:
            store_type = StoreType(store_type.lower())
        except ValueError as e:
            raise ValueError(
                f"Unsupported store type: {store_type}. "
                f"Must be one of: {', '.join(t.value for t in StoreType)}"
            ) from e

    if store_type == StoreType.CLI:
        return OstreeCliStore(Path(path))
    return MemoryStore(repo_path=Path(path))


def get_store(path: str | Path) -> RepositoryStore:
    """Create a store backend using environment configuration."""
    from common.env import env

    return create_store(env.store_type(), path)
