"""Interactive TUI for azdo-branches using Textual."""

from typing import Dict, List, Optional

from rich.style import Style
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from .__version__ import __version__
from .constants import (
    DETAILS_HORIZONTAL_PADDING,
    POLL_INTERVAL,
    SYMBOL_NOT_CURRENT,
    SYMBOL_SELECTED,
    Theme,
)
from .core.app_state import NORMAL, AppMode, ConfirmDelete, ErrorPopup
from .core.keys import handle_key, handle_mouse_scroll
from .core.session import BranchSession
from .formatters import (
    format_branch_info,
    format_branch_label,
    format_key_hints,
    format_work_item_details,
)
from .logging_config import get_logger

logger = get_logger(__name__)

SELECTED_STYLE = Style(bgcolor="grey30", bold=True)


def _key_hint(keys: List[str], action: str) -> Text:
    hint = Text("Press ")
    for index, key in enumerate(keys):
        hint.append(key, style=Theme.TITLE)
        if index < len(keys) - 1:
            hint.append(" or ")
    hint.append(f" to {action}.")
    return hint


class SessionModal(ModalScreen):
    """Popup whose keys go back to the session's key handling."""

    DEFAULT_CSS = """
    SessionModal {
        align: center middle;
    }

    #popup {
        width: 60;
        height: auto;
        max-width: 90%;
        border: round red;
        border-title-color: red;
        border-title-style: bold;
        background: $surface;
        padding: 0 1;
        text-align: center;
    }
    """

    TITLE_TEXT = ""

    def body(self) -> Text:
        raise NotImplementedError

    def compose(self) -> ComposeResult:
        popup = Static(self.body(), id="popup")
        popup.border_title = self.TITLE_TEXT
        yield popup

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.app.handle_session_key(event.key)


class ConfirmDeleteScreen(SessionModal):
    """Modal delete confirmation."""

    TITLE_TEXT = " Delete Branch "

    def __init__(self, branch_name: str):
        super().__init__()
        self.branch_name = branch_name

    def body(self) -> Text:
        return Text("\n").join([
            Text(""),
            Text.assemble(
                "Are you sure you want to delete branch ",
                (self.branch_name, Theme.CURRENT_BRANCH),
                "?",
            ),
            Text(""),
            _key_hint(["y"], "confirm"),
            _key_hint(["n", "Esc"], "cancel"),
        ])


class ErrorScreen(SessionModal):
    """Modal error display."""

    TITLE_TEXT = " Error "

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def body(self) -> Text:
        return Text("\n").join([
            Text(""),
            Text(self.message, style=Theme.ERROR),
            Text(""),
            _key_hint(["Enter", "Esc"], "dismiss"),
        ])


class BranchBrowserApp(App):
    """Branch list, work item details and branch info for one repository."""

    TITLE = "azdo-branches"
    SUB_TITLE = f"v{__version__}"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    #main {
        height: 1fr;
    }

    #branches {
        width: 35%;
        height: 100%;
        border: round cyan;
        border-title-color: cyan;
        border-title-style: bold;
    }

    #right {
        width: 1fr;
    }

    #details {
        height: 1fr;
        border: round cyan;
        border-title-color: cyan;
        border-title-style: bold;
        border-subtitle-color: grey;
    }

    #branch-info {
        height: 4;
        border: round cyan;
        border-title-color: cyan;
        border-title-style: bold;
    }

    #footer {
        height: 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "help_quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, session: BranchSession):
        super().__init__()
        self.session = session
        self.state = session.state
        self._modal: Optional[SessionModal] = None
        self._modal_mode: AppMode = NORMAL
        self._list_offset = 0
        self._panes: Dict[str, Static] = {}

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        with Horizontal(id="main"):
            yield Static(id="branches")
            with Vertical(id="right"):
                yield Static(id="details")
                yield Static(id="branch-info")
        yield Static(id="footer")

    def on_mount(self) -> None:
        titles = {
            "branches": " Branches ",
            "details": " Work Item Details ",
            "branch-info": " Branch Info ",
            "footer": "",
        }
        # Held directly: queries would hit a popup screen while one is shown
        for pane_id, title in titles.items():
            pane = self.query_one(f"#{pane_id}", Static)
            pane.border_title = title or None
            self._panes[pane_id] = pane
        self.set_interval(POLL_INTERVAL, self._on_tick)
        self._on_tick()

    def on_unmount(self) -> None:
        self.session.fetcher.shutdown()

    # -- input -------------------------------------------------------------

    def handle_session_key(self, key: str) -> None:
        action = handle_key(self.state, key)
        if action is not None:
            self.session.dispatch(action)
        self._after_update()

    def on_key(self, event: events.Key) -> None:
        if self._modal is not None:
            return
        event.stop()
        self.handle_session_key(event.key)

    def action_help_quit(self) -> None:
        """Ctrl+C quits like q, even while a popup is open."""
        self.state.quit()
        self._after_update()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        handle_mouse_scroll(self.state, down=True)
        self._redraw()

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        handle_mouse_scroll(self.state, down=False)
        self._redraw()

    def on_resize(self, event: events.Resize) -> None:
        self._redraw()

    # -- loop --------------------------------------------------------------

    def _on_tick(self) -> None:
        self.session.tick()
        self._after_update()

    def _after_update(self) -> None:
        if self.state.should_quit:
            self.exit()
            return
        self._sync_modal()
        self._redraw()

    def _sync_modal(self) -> None:
        """Show the popup that matches the current mode."""
        mode = self.state.mode
        if mode == self._modal_mode:
            return

        if self._modal is not None:
            self.pop_screen()
            self._modal = None
        self._modal_mode = mode

        if isinstance(mode, ConfirmDelete):
            self._modal = ConfirmDeleteScreen(mode.branch_name)
        elif isinstance(mode, ErrorPopup):
            self._modal = ErrorScreen(mode.message)
        if self._modal is not None:
            self.push_screen(self._modal)

    # -- drawing -----------------------------------------------------------

    def _redraw(self) -> None:
        if not self._panes:
            return
        self._draw_branches()
        self._draw_details()
        self._draw_branch_info()
        self._draw_footer()

    def _draw_branches(self) -> None:
        widget = self._panes["branches"]
        height = max(1, widget.content_size.height)
        visible = self.state.visible
        selected = self.state.selected_index

        # Keep the selection in view
        if selected < self._list_offset:
            self._list_offset = selected
        elif selected >= self._list_offset + height:
            self._list_offset = selected - height + 1
        self._list_offset = max(0, min(self._list_offset, len(visible) - height))

        lines = []
        for index in range(self._list_offset, min(len(visible), self._list_offset + height)):
            label = format_branch_label(visible[index])
            if index == selected:
                row = Text.assemble(SYMBOL_SELECTED, label)
                row.stylize(SELECTED_STYLE)
            else:
                row = Text.assemble(SYMBOL_NOT_CURRENT, label)
            lines.append(row)
        widget.update(Text("\n").join(lines))

    def _draw_details(self) -> None:
        widget = self._panes["details"]
        state = self.state
        height = widget.content_size.height
        max_width = max(0, widget.content_size.width - DETAILS_HORIZONTAL_PADDING)

        if state.selected_branch() is None:
            lines = [Text(""), Text("  No branches to show", style=Theme.MUTED)]
        else:
            work_item_id = state.selected_work_item_id()
            status = state.work_item_status(work_item_id) if work_item_id is not None else None
            lines = format_work_item_details(work_item_id, status, max_width)

        state.set_visible_height(height)
        state.set_content_height(len(lines))
        offset = state.scroll_offset
        widget.update(Text("\n").join(lines[offset:offset + height]))

        if state.content_height > height:
            widget.border_subtitle = f" {offset + 1}/{state.max_scroll() + 1} "
        else:
            widget.border_subtitle = ""

    def _draw_branch_info(self) -> None:
        branch = self.state.selected_branch()
        status = self.state.branch_status(branch.name) if branch else None
        lines = format_branch_info(branch, status)
        self._panes["branch-info"].update(Text("\n").join(lines))

    def _draw_footer(self) -> None:
        message = self.state.current_status()
        if message is not None:
            style = Theme.ERROR if message.is_error else Theme.SUCCESS + Style(bold=True)
            content = Text(message.text, style=style)
        else:
            content = format_key_hints(self.state.show_protected, self.state.current_branch_has_work_item())
        self._panes["footer"].update(content)
