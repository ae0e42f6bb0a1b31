"""In-memory repository store.

Used by the test suite and by `OSTREE_STORE=memory` demos. Objects listed in
``corrupt`` raise CorruptObjectError when loaded, which lets callers exercise
truncated history walks.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .errors import CorruptObjectError, NotFoundError, RepoOpenError
from .models import CommitMetadata, Signature
from .store import RepositoryStore


@dataclass
class MemoryStore(RepositoryStore):
    """Store whose refs, commits and signatures live in dictionaries."""

    repo_path: Path = Path("memory://")
    refs: dict[str, str] = field(default_factory=dict)
    commits: dict[str, CommitMetadata] = field(default_factory=dict)
    signatures: dict[str, list[Signature]] = field(default_factory=dict)
    corrupt: set[str] = field(default_factory=set)
    valid: bool = True
    calls: list[tuple[str, str]] = field(default_factory=list, repr=False)

    @property
    def path(self) -> Path:
        return self.repo_path

    def open(self) -> None:
        if not self.valid:
            raise RepoOpenError(f"Not an OSTree repository: {self.repo_path}")

    def list_branch_refs(self) -> set[str]:
        return set(self.refs)

    def resolve_head(self, name: str) -> str:
        try:
            return self.refs[name]
        except KeyError:
            raise NotFoundError(f"Cannot resolve ref {name}") from None

    def load_commit_metadata(self, commit_hash: str) -> CommitMetadata:
        self.calls.append(("load", commit_hash))
        if commit_hash in self.corrupt or commit_hash not in self.commits:
            raise CorruptObjectError(f"Cannot load commit {commit_hash}")
        return self.commits[commit_hash]

    def verify_signatures(self, commit_hash: str) -> list[Signature]:
        self.calls.append(("verify", commit_hash))
        return list(self.signatures.get(commit_hash, []))

    def add_commit(
        self,
        commit_hash: str,
        metadata: CommitMetadata,
        signatures: list[Signature] | None = None,
    ) -> None:
        self.commits[commit_hash] = metadata
        if signatures:
            self.signatures[commit_hash] = signatures
