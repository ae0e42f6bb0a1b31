"""Data models for commits, signatures and the commit graph."""

import json
from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from typing import Any

from common.constants import NO_SUBJECT, SHORT_HASH_LENGTH


@dataclass(frozen=True)
class Signature:
    """GPG signature over a commit, with its verification result."""

    fingerprint: str = ""
    fingerprint_primary: str = ""
    pubkey_algorithm: str = ""
    username: str = ""
    usermail: str = ""
    timestamp: datetime | None = None
    expire_timestamp: datetime | None = None
    key_expire_timestamp: datetime | None = None
    key_expire_timestamp_primary: datetime | None = None
    valid: bool = False
    sig_expired: bool = True
    key_expired: bool = True
    key_revoked: bool = False
    key_missing: bool = True


@dataclass(frozen=True)
class CommitMetadata:
    """Commit fields as loaded from the store, before branch attribution."""

    parent_hash: str | None
    timestamp: datetime
    subject: str
    body: str
    content_checksum: str
    version: str | None = None


@dataclass(frozen=True)
class CommitRecord:
    """A single commit, represented once regardless of how many branches reach it."""

    hash: str
    parent_hash: str | None
    timestamp: datetime
    subject: str
    body: str
    content_checksum: str
    branches: frozenset[str]
    signatures: tuple[Signature, ...] = ()
    version: str | None = None

    @property
    def short_hash(self) -> str:
        return self.hash[:SHORT_HASH_LENGTH]

    @property
    def is_root(self) -> bool:
        return self.parent_hash is None

    @property
    def is_signed(self) -> bool:
        return len(self.signatures) > 0

    @property
    def title(self) -> str:
        return self.subject or NO_SUBJECT


@dataclass(frozen=True)
class Branch:
    """A named ref and the head it resolved to at the last refresh."""

    name: str
    head: str


@dataclass(frozen=True)
class CommitGraph(Mapping):
    """Immutable mapping of commit hash to CommitRecord.

    Built wholesale by RepositoryModel.refresh(); never patched in place.
    """

    commits: Mapping[str, CommitRecord] = field(default_factory=dict)
    branch_heads: tuple[Branch, ...] = ()

    def __getitem__(self, commit_hash: str) -> CommitRecord:
        return self.commits[commit_hash]

    def __iter__(self) -> Iterator[str]:
        return iter(self.commits)

    def __len__(self) -> int:
        return len(self.commits)

    @property
    def branch_names(self) -> list[str]:
        return [branch.name for branch in self.branch_heads]

    def head_of(self, branch: str) -> str | None:
        for entry in self.branch_heads:
            if entry.name == branch:
                return entry.head
        return None

    def commits_of_branch(self, branch: str) -> list[CommitRecord]:
        """All commits reachable from *branch*, newest first."""
        records = [c for c in self.commits.values() if branch in c.branches]
        return sorted(records, key=lambda c: (-c.timestamp.timestamp(), c.hash))

    def most_recent_commit_of_branch(self, branch: str) -> CommitRecord | None:
        head = self.head_of(branch)
        if head is None:
            return None
        return self.commits.get(head)

    def is_most_recent_commit_on_branch(self, commit_hash: str) -> bool:
        """True if *commit_hash* is the head of at least one branch."""
        return any(entry.head == commit_hash for entry in self.branch_heads)

    def dangling_parents(self) -> set[str]:
        """Parent hashes referenced by a commit but absent from the graph.

        Empty for any graph whose walks all completed without truncation.
        """
        return {
            c.parent_hash
            for c in self.commits.values()
            if c.parent_hash is not None and c.parent_hash not in self.commits
        }

    def signatures_by_commit(self) -> dict[str, tuple[Signature, ...]]:
        return {h: c.signatures for h, c in self.commits.items()}


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def to_json(data: Any, indent: int = 2) -> str:
    """Serialize records (or lists of records) to JSON with ISO timestamps."""
    if isinstance(data, (list, tuple)):
        serializable = [asdict(item) if is_dataclass(item) else item for item in data]
    elif is_dataclass(data):
        serializable = asdict(data)
    else:
        serializable = data
    return json.dumps(serializable, indent=indent, default=_default_serializer)
