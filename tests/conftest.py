"""Shared fixtures: small in-memory repositories."""

from datetime import datetime, timezone

import pytest

from repository.memory import MemoryStore
from repository.model import RepositoryModel
from repository.models import CommitMetadata


def at(seconds: int) -> datetime:
    """UTC instant *seconds* after the epoch."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def meta(parent: str | None, seconds: int, subject: str = "") -> CommitMetadata:
    return CommitMetadata(
        parent_hash=parent,
        timestamp=at(seconds),
        subject=subject,
        body="",
        content_checksum=f"content-{seconds}",
    )


@pytest.fixture
def make_meta():
    """Factory for CommitMetadata: make_meta(parent, seconds, subject="")."""
    return meta


@pytest.fixture
def scenario_store():
    """C1(t=100) <- C2(t=200, head of a); C1 <- C3(t=150, head of b)."""
    store = MemoryStore()
    store.add_commit("c1", meta(None, 100, "Initial import"))
    store.add_commit("c2", meta("c1", 200, "Update a"))
    store.add_commit("c3", meta("c1", 150, "Branch b"))
    store.refs = {"a": "c2", "b": "c3"}
    return store


@pytest.fixture
def scenario_model(scenario_store):
    model = RepositoryModel.open("memory://scenario", store=scenario_store)
    assert model.refresh()
    return model
