"""Discrete input events consumed by BrowserSession."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class ToggleBranch:
    name: str


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class CopySelectedHash:
    pass


@dataclass(frozen=True)
class Exit:
    pass


BrowserEvent = MoveUp | MoveDown | ToggleBranch | Refresh | CopySelectedHash | Exit


@dataclass(frozen=True)
class EventResult:
    """Outcome of one event.

    Attributes:
        changed: The view state changed and needs a redraw
        clipboard: Text to place on the clipboard, if any
        exit: The interactive loop should stop
    """

    changed: bool = False
    clipboard: str | None = None
    exit: bool = False
