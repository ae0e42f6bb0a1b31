"""Repository model: builds the commit graph from all branch heads.

Every refresh walks each branch from its head back through parent links
until a root or an already visited commit is reached. History shared by
several branches is loaded once and only its branch set grows. Store
failures are absorbed here and surface as RefreshWarning entries, so
nothing above this layer ever sees a store exception.
"""

from dataclasses import dataclass
from pathlib import Path

from common.logger import get_logger

from .errors import CorruptObjectError, NotFoundError, RepositoryError
from .factory import get_store
from .models import Branch, CommitGraph, CommitMetadata, CommitRecord, Signature
from .store import RepositoryStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class RefreshWarning:
    """Non-fatal problem found while loading one branch."""

    branch: str
    commit_hash: str | None
    message: str

    def __str__(self) -> str:
        if self.commit_hash:
            return f"{self.branch}: {self.message} ({self.commit_hash[:10]})"
        return f"{self.branch}: {self.message}"


class RepositoryModel:
    """Read-only view of a repository store as a CommitGraph."""

    def __init__(self, store: RepositoryStore):
        self.store = store
        self._graph = CommitGraph()
        self._branches: list[str] = []
        self.warnings: list[RefreshWarning] = []
        self.loaded = False
        self.changed = False

    @classmethod
    def open(cls, path: str | Path, store: RepositoryStore | None = None) -> "RepositoryModel":
        """Open the repository at *path*.

        Raises:
            RepoOpenError: If the path is not a recognized store
        """
        if store is None:
            store = get_store(path)
        store.open()
        logger.debug(f"Opened repository {store.path}")
        return cls(store)

    @property
    def path(self) -> Path:
        return self.store.path

    @property
    def graph(self) -> CommitGraph:
        return self._graph

    def branches(self) -> list[str]:
        """Branch names from the last successful refresh, sorted."""
        return list(self._branches)

    def refresh(self) -> bool:
        """Rebuild the commit graph from the store.

        The previous graph stays in place until the new one is complete, so
        a failed refresh never exposes a partial graph.

        Returns:
            True if the graph was rebuilt, False if the store failed outside
            of a single branch walk (the previous graph is kept).
        """
        try:
            graph, warnings = self._build()
        except RepositoryError as e:
            logger.error(f"Refresh of {self.path} failed: {e}")
            return False

        self.store.retain_commits(set(graph))
        self.changed = not self.loaded or graph != self._graph
        self._graph = graph
        self._branches = graph.branch_names
        self.warnings = warnings
        self.loaded = True

        logger.info(
            f"Loaded {len(graph)} commits on {len(graph.branch_heads)} branches"
            + (f" with {len(warnings)} warnings" if warnings else "")
        )
        return True

    def _build(self) -> tuple[CommitGraph, list[RefreshWarning]]:
        # Store order is unspecified; sort for a deterministic walk
        names = sorted(self.store.list_branch_refs())

        warnings: list[RefreshWarning] = []
        metadata: dict[str, CommitMetadata] = {}
        branch_sets: dict[str, set[str]] = {}
        heads: list[Branch] = []

        for name in names:
            try:
                head = self.store.resolve_head(name)
            except NotFoundError as e:
                logger.warning(f"Skipping branch {name}: {e}")
                warnings.append(RefreshWarning(name, None, "head could not be resolved"))
                continue
            heads.append(Branch(name=name, head=head))
            warning = self._walk_branch(name, head, metadata, branch_sets)
            if warning is not None:
                warnings.append(warning)

        commits: dict[str, CommitRecord] = {}
        for commit_hash, meta in metadata.items():
            commits[commit_hash] = CommitRecord(
                hash=commit_hash,
                parent_hash=meta.parent_hash,
                timestamp=meta.timestamp,
                subject=meta.subject,
                body=meta.body,
                content_checksum=meta.content_checksum,
                branches=frozenset(branch_sets[commit_hash]),
                signatures=tuple(self._verify(commit_hash)),
                version=meta.version,
            )

        return CommitGraph(commits=commits, branch_heads=tuple(heads)), warnings

    def _walk_branch(
        self,
        branch: str,
        head: str,
        metadata: dict[str, CommitMetadata],
        branch_sets: dict[str, set[str]],
    ) -> RefreshWarning | None:
        """Walk parent links from *head*, stopping at a root or a known commit.

        Commits already loaded by an earlier branch have their branch set
        extended for the whole remaining ancestry without reloading.
        """
        stack = [head]
        visited: set[str] = set()

        while stack:
            commit_hash = stack.pop()
            if commit_hash in visited:
                logger.warning(f"Cycle detected on branch {branch} at {commit_hash}")
                return RefreshWarning(branch, commit_hash, "parent cycle detected")
            visited.add(commit_hash)

            if commit_hash in metadata:
                branch_sets[commit_hash].add(branch)
                parent = metadata[commit_hash].parent_hash
                if parent is not None and parent in metadata:
                    stack.append(parent)
                continue

            try:
                meta = self.store.load_commit_metadata(commit_hash)
            except CorruptObjectError as e:
                logger.warning(f"History of {branch} truncated at {commit_hash}: {e}")
                return RefreshWarning(branch, commit_hash, "history truncated")

            logger.debug(f"Loaded commit {commit_hash} on {branch}")
            metadata[commit_hash] = meta
            branch_sets[commit_hash] = {branch}
            if meta.parent_hash is not None:
                stack.append(meta.parent_hash)

        return None

    def _verify(self, commit_hash: str) -> list[Signature]:
        try:
            return self.store.verify_signatures(commit_hash)
        except RepositoryError as e:
            logger.warning(f"Signature verification of {commit_hash} failed: {e}")
            return [Signature()]
