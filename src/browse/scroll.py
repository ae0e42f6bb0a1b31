"""Scroll offset that keeps the selected log entry in view."""

from dataclasses import dataclass

from common.constants import COMMIT_ENTRY_HEIGHT


def target_offset(index: int, entry_height: int) -> int:
    return index * entry_height


def clamp_offset(offset: int, content_height: int, viewport_height: int) -> int:
    """Clamp *offset* to [0, content_height - viewport_height].

    Content shorter than the viewport always scrolls to 0.
    """
    upper = max(content_height - viewport_height, 0)
    return min(max(offset, 0), upper)


@dataclass(frozen=True)
class ScrollSync:
    """Maps a selection index to the applied scroll offset of the log pane."""

    entry_height: int = COMMIT_ENTRY_HEIGHT

    def offset_for(self, index: int | None, entry_count: int, viewport_height: int) -> int:
        if index is None:
            return 0
        content_height = entry_count * self.entry_height
        return clamp_offset(
            target_offset(index, self.entry_height), content_height, viewport_height
        )
