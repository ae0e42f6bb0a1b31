"""Branch filtering, commit ordering and selection for the commit browser."""

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
from .projection import ViewSequence, compute
from .scroll import ScrollSync, clamp_offset, target_offset
from .selection import SelectionController, SelectionState
from .session import BrowserSession, ViewState, assign_branch_colors
from .visibility import BranchVisibilitySet

__all__ = [
    "BranchVisibilitySet",
    "BrowserEvent",
    "BrowserSession",
    "CopySelectedHash",
    "EventResult",
    "Exit",
    "MoveDown",
    "MoveUp",
    "Refresh",
    "ScrollSync",
    "SelectionController",
    "SelectionState",
    "ToggleBranch",
    "ViewSequence",
    "ViewState",
    "assign_branch_colors",
    "clamp_offset",
    "compute",
    "target_offset",
]
