"""Session core: application state, key handling and the loop driver."""

from .actions import Action, CheckoutBranch, DeleteBranch, OpenWorkItem, RefreshWorkItem
from .app_state import AppState, ConfirmDelete, ErrorPopup, NormalMode, StatusMessage
from .keys import handle_key, handle_mouse_scroll
from .session import BranchSession, build_branch_infos

__all__ = [
    "Action",
    "CheckoutBranch",
    "DeleteBranch",
    "OpenWorkItem",
    "RefreshWorkItem",
    "AppState",
    "ConfirmDelete",
    "ErrorPopup",
    "NormalMode",
    "StatusMessage",
    "handle_key",
    "handle_mouse_scroll",
    "BranchSession",
    "build_branch_infos",
]
