"""Browser session: the single owner of all mutable browsing state.

The interactive loop holds one BrowserSession and feeds it events. Every
change of selection, visibility or repository data goes through
handle(), and renderers only ever see the immutable ViewState snapshot.

Selection policy on recomputation: the previously selected commit stays
selected if it is still visible; otherwise the old index is clamped to the
new sequence length.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from common.constants import BRANCH_PALETTE
from common.logger import get_logger
from repository.errors import RepoOpenError
from repository.model import RefreshWarning, RepositoryModel
from repository.models import CommitGraph, CommitRecord

from . import projection
from .events import (
    BrowserEvent,
    CopySelectedHash,
    EventResult,
    Exit,
    MoveDown,
    MoveUp,
    Refresh,
    ToggleBranch,
)
from .projection import ViewSequence
from .selection import SelectionController, SelectionState
from .visibility import BranchVisibilitySet

logger = get_logger(__name__)


def assign_branch_colors(branches: Iterable[str]) -> dict[str, str]:
    """Stable color per branch, by position in sorted branch order."""
    return {
        name: BRANCH_PALETTE[i % len(BRANCH_PALETTE)] for i, name in enumerate(sorted(branches))
    }


@dataclass(frozen=True)
class ViewState:
    """Everything a renderer needs, detached from the live session."""

    repo_path: str
    graph: CommitGraph
    sequence: ViewSequence
    selection_index: int | None
    selected: CommitRecord | None
    branches: tuple[tuple[str, bool], ...]
    branch_colors: dict[str, str] = field(default_factory=dict)
    warnings: tuple[RefreshWarning, ...] = ()

    @property
    def visible_branches(self) -> list[str]:
        return [name for name, visible in self.branches if visible]


class BrowserSession:
    """Owns RepositoryModel, BranchVisibilitySet and SelectionController."""

    def __init__(self, model: RepositoryModel):
        self.model = model
        self.visibility = BranchVisibilitySet()
        self.selection = SelectionController()
        self.sequence: ViewSequence = ()
        self.colors: dict[str, str] = {}

    @classmethod
    def start(
        cls,
        model: RepositoryModel,
        startup_filter: Iterable[str] | None = None,
    ) -> "BrowserSession":
        """Load the repository and apply the startup branch filter.

        Raises:
            RepoOpenError: If the first load of the repository fails
            UnknownBranchError: If the filter names a branch that does not exist
        """
        session = cls(model)
        if not model.loaded and not model.refresh():
            raise RepoOpenError(f"Cannot read repository {model.path}")
        session.visibility.initialize(model.branches(), startup_filter)
        session.colors = assign_branch_colors(model.branches())
        session._recompute()
        return session

    def handle(self, event: BrowserEvent) -> EventResult:
        """Apply one input event."""
        if isinstance(event, MoveDown):
            return EventResult(changed=self.selection.next())
        if isinstance(event, MoveUp):
            return EventResult(changed=self.selection.prev())
        if isinstance(event, ToggleBranch):
            return EventResult(changed=self.toggle_branch(event.name))
        if isinstance(event, Refresh):
            return EventResult(changed=self.refresh())
        if isinstance(event, CopySelectedHash):
            return EventResult(clipboard=self.selected_hash())
        if isinstance(event, Exit):
            return EventResult(exit=True)
        raise TypeError(f"Unsupported event: {event!r}")

    def toggle_branch(self, name: str) -> bool:
        if self.visibility.toggle(name) is None:
            logger.debug(f"Ignoring toggle of unknown branch {name}")
            return False
        self._recompute()
        return True

    def refresh(self) -> bool:
        """Reload the repository; the view keeps the old graph on failure."""
        if not self.model.refresh():
            return False
        self.visibility.sync(self.model.branches())
        self.colors = assign_branch_colors(self.model.branches())
        self._recompute()
        return True

    def _recompute(self) -> None:
        previous = self.selected_hash()
        self.sequence = projection.compute(self.model.graph, self.visibility)

        preferred = None
        if previous is not None and previous in self.sequence:
            preferred = self.sequence.index(previous)
        self.selection.on_sequence_changed(len(self.sequence), preferred)

        if self.selection.state is SelectionState.EMPTY:
            logger.debug("No visible commits")

    def selected_hash(self) -> str | None:
        return self.selection.selected_hash(self.sequence)

    def selected_commit(self) -> CommitRecord | None:
        commit_hash = self.selected_hash()
        if commit_hash is None:
            return None
        return self.model.graph.get(commit_hash)

    def visible_branches(self) -> list[str]:
        return sorted(self.visibility.visible_set())

    def snapshot(self) -> ViewState:
        return ViewState(
            repo_path=str(self.model.path),
            graph=self.model.graph,
            sequence=self.sequence,
            selection_index=self.selection.index,
            selected=self.selected_commit(),
            branches=tuple(self.visibility.items()),
            branch_colors=dict(self.colors),
            warnings=tuple(self.model.warnings),
        )
