"""Selection index over the current view sequence."""

from collections.abc import Sequence
from enum import Enum


class SelectionState(str, Enum):
    """Selection controller states."""

    EMPTY = "empty"
    BROWSING = "browsing"


class SelectionController:
    """Clamped index into a ViewSequence.

    Empty while the sequence has no entries, Browsing otherwise. The index
    is always within [0, length - 1] while Browsing.
    """

    def __init__(self) -> None:
        self._index: int | None = None
        self._length = 0

    @property
    def state(self) -> SelectionState:
        return SelectionState.EMPTY if self._index is None else SelectionState.BROWSING

    @property
    def index(self) -> int | None:
        return self._index

    @property
    def length(self) -> int:
        return self._length

    def on_sequence_changed(self, new_length: int, preferred_index: int | None = None) -> None:
        """Re-clamp after the sequence was recomputed.

        Args:
            new_length: Length of the new sequence
            preferred_index: Index to jump to instead of keeping the current
                one, e.g. the new position of the previously selected commit.
                Ignored when out of range.
        """
        self._length = max(new_length, 0)
        if self._length == 0:
            self._index = None
            return

        if preferred_index is not None and 0 <= preferred_index < self._length:
            self._index = preferred_index
        elif self._index is None:
            self._index = 0
        else:
            self._index = min(self._index, self._length - 1)

    def next(self) -> bool:
        """Move one entry down. Returns False at the last entry."""
        if self._index is None or self._index + 1 >= self._length:
            return False
        self._index += 1
        return True

    def prev(self) -> bool:
        """Move one entry up. Returns False at the first entry."""
        if self._index is None or self._index == 0:
            return False
        self._index -= 1
        return True

    def selected_hash(self, sequence: Sequence[str]) -> str | None:
        if self._index is None or self._index >= len(sequence):
            return None
        return sequence[self._index]
