"""Key bindings for the interactive session.

Keys are Textual key names ("j", "J", "shift+down", "ctrl+d", "pagedown"...).
Handling mutates the state for pure UI changes and returns an Action for
anything that needs git, the network or the browser.
"""
from typing import Optional

from azdo_branches.constants import LINE_SCROLL_AMOUNT
from azdo_branches.core.actions import Action, CheckoutBranch, OpenWorkItem, RefreshWorkItem
from azdo_branches.core.app_state import AppState, ConfirmDelete, ErrorPopup

QUIT_KEYS = {"q", "escape", "ctrl+c"}
NEXT_KEYS = {"down", "j"}
PREVIOUS_KEYS = {"up", "k"}
LINE_DOWN_KEYS = {"shift+down", "J"}
LINE_UP_KEYS = {"shift+up", "K"}
PAGE_DOWN_KEYS = {"pagedown", "ctrl+d"}
PAGE_UP_KEYS = {"pageup", "ctrl+u"}

CONFIRM_KEYS = {"y", "enter"}
CANCEL_KEYS = {"n", "escape", "q"}
DISMISS_KEYS = {"enter", "escape", "q"}


def handle_key(state: AppState, key: str) -> Optional[Action]:
    """Dispatch a key press according to the current mode."""
    if isinstance(state.mode, ConfirmDelete):
        return _handle_confirm_delete_key(state, key)
    if isinstance(state.mode, ErrorPopup):
        if key in DISMISS_KEYS:
            state.cancel_mode()
        return None
    return _handle_normal_key(state, key)


def _handle_normal_key(state: AppState, key: str) -> Optional[Action]:
    if key in QUIT_KEYS:
        state.quit()
    elif key in NEXT_KEYS:
        state.next()
    elif key in PREVIOUS_KEYS:
        state.previous()
    elif key in LINE_DOWN_KEYS:
        state.scroll_down(LINE_SCROLL_AMOUNT)
    elif key in LINE_UP_KEYS:
        state.scroll_up(LINE_SCROLL_AMOUNT)
    elif key in PAGE_DOWN_KEYS:
        state.scroll_down(state.page_size())
    elif key in PAGE_UP_KEYS:
        state.scroll_up(state.page_size())
    elif key == "d":
        return state.request_delete()
    elif key == "D":
        return state.request_delete(force=True)
    elif key == "o":
        return OpenWorkItem()
    elif key == "enter":
        branch = state.selected_branch()
        if branch is not None:
            return CheckoutBranch(branch.name)
    elif key == "r":
        work_item_id = state.selected_work_item_id()
        if work_item_id is not None:
            return RefreshWorkItem(work_item_id)
    elif key == "p":
        state.toggle_show_protected()
    return None


def _handle_confirm_delete_key(state: AppState, key: str) -> Optional[Action]:
    if key in CONFIRM_KEYS:
        return state.confirm_delete()
    if key in CANCEL_KEYS:
        state.cancel_mode()
    return None


def handle_mouse_scroll(state: AppState, down: bool) -> None:
    """Wheel scrolling of the details pane; ignored while a popup is open."""
    if not state.is_normal_mode():
        return
    if down:
        state.scroll_down(LINE_SCROLL_AMOUNT)
    else:
        state.scroll_up(LINE_SCROLL_AMOUNT)
