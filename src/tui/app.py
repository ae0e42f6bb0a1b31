"""Interactive commit browser built on Textual.

Layout: commit log on the left, a manager pane with "Info" and "Filter"
tabs on the right, key hints and warnings in the footer line. Keyboard
steps and mouse wheel notches both end up as MoveUp/MoveDown events on
the BrowserSession, which is the only place selection changes.
"""

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import MouseScrollDown, MouseScrollUp
from textual.widget import Widget
from textual.widgets import SelectionList, Static, TabbedContent

from browse.events import (
    BrowserEvent,
    CopySelectedHash,
    EventResult,
    Exit,
    MoveDown,
    MoveUp,
    Refresh,
    ToggleBranch,
)
from browse.scroll import ScrollSync
from browse.session import BrowserSession, ViewState
from common.logger import get_logger

from .render import render_info, render_log, render_status, render_title

logger = get_logger(__name__)


class CommitLog(Widget, can_focus=True):
    """Log pane. Draws only the window that ScrollSync exposes."""

    BINDINGS = [
        Binding("up", "app.move_up", "Up", show=False),
        Binding("down", "app.move_down", "Down", show=False),
    ]

    def __init__(self, scroll: ScrollSync | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.scroll = scroll or ScrollSync()
        self.state: ViewState | None = None

    def show(self, state: ViewState) -> None:
        self.state = state
        self.refresh()

    def render(self) -> Text:
        if self.state is None:
            return Text("loading…", style="dim")
        return render_log(self.state, self.size.height, self.scroll)

    async def on_mouse_scroll_down(self, event: MouseScrollDown) -> None:
        event.stop()
        await self.run_action("app.move_down")

    async def on_mouse_scroll_up(self, event: MouseScrollUp) -> None:
        event.stop()
        await self.run_action("app.move_up")


class OstreeBrowserApp(App):
    """Full-screen OSTree commit browser."""

    TITLE = "OSTree TUI"

    CSS = """
    #title {
        height: 1;
        background: $boost;
    }
    #body {
        height: 1fr;
    }
    #log {
        width: 2fr;
        border: round $primary;
    }
    #manager {
        width: 1fr;
        min-width: 40;
    }
    #status {
        height: 1;
        background: $boost;
    }
    """

    BINDINGS = [
        Binding("q", "exit_browser", "Quit"),
        Binding("escape", "exit_browser", "Quit", show=False),
        Binding("r", "reload", "Refresh"),
        Binding("f5", "reload", "Refresh", show=False),
        Binding("c", "copy_hash", "Copy hash"),
        Binding("k", "move_up", "Up", show=False),
        Binding("j", "move_down", "Down", show=False),
        Binding("plus", "move_up", "Up", show=False),
        Binding("minus", "move_down", "Down", show=False),
    ]

    def __init__(self, session: BrowserSession, refresh_interval: float = 0) -> None:
        super().__init__()
        self.browser_session = session
        self._refresh_interval = refresh_interval
        self._branch_names: list[str] = []

    def compose(self) -> ComposeResult:
        yield Static(id="title")
        with Horizontal(id="body"):
            yield CommitLog(id="log")
            with TabbedContent("Info", "Filter", id="manager"):
                yield Static(id="info")
                yield SelectionList[str](id="branches")
        yield Static(id="status")

    def on_mount(self) -> None:
        self._sync_branch_list()
        self._redraw()
        self.query_one(CommitLog).focus()
        if self._refresh_interval > 0:
            self.set_interval(self._refresh_interval, self.action_reload)

    def apply_event(self, event: BrowserEvent) -> EventResult:
        """Route one event to the session and update the screen."""
        result = self.browser_session.handle(event)
        if result.clipboard is not None:
            self.copy_to_clipboard(result.clipboard)
            self.notify(f"Copied {result.clipboard}")
        if result.changed:
            if isinstance(event, Refresh):
                self._sync_branch_list()
            self._redraw()
        if result.exit:
            self.exit()
        return result

    def action_move_up(self) -> None:
        self.apply_event(MoveUp())

    def action_move_down(self) -> None:
        self.apply_event(MoveDown())

    def action_reload(self) -> None:
        result = self.apply_event(Refresh())
        if not result.changed:
            self.notify("Refresh failed, showing previous data", severity="warning")

    def action_copy_hash(self) -> None:
        self.apply_event(CopySelectedHash())

    def action_exit_browser(self) -> None:
        self.apply_event(Exit())

    @on(SelectionList.SelectionToggled, "#branches")
    def branch_toggled(self, event: SelectionList.SelectionToggled) -> None:
        self.apply_event(ToggleBranch(event.selection.value))

    def _sync_branch_list(self) -> None:
        names = [name for name, _ in self.browser_session.visibility.items()]
        if names == self._branch_names:
            return
        branch_list = self.query_one("#branches", SelectionList)
        branch_list.clear_options()
        branch_list.add_options(
            [
                (Text(name, style=self.browser_session.colors.get(name, "white")), name, visible)
                for name, visible in self.browser_session.visibility.items()
            ]
        )
        self._branch_names = names

    def _redraw(self) -> None:
        state = self.browser_session.snapshot()
        self.query_one("#title", Static).update(render_title(state))
        self.query_one(CommitLog).show(state)
        self.query_one("#info", Static).update(render_info(state.selected, state.graph))
        self.query_one("#status", Static).update(render_status(state))
