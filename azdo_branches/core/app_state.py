"""Application state for the interactive session.

Everything here runs on the loop thread. Background fetch results reach the
state only through ``FetchOrchestrator.drain``.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from azdo_branches.constants import LINE_SCROLL_AMOUNT, PAGE_SCROLL_DIVISOR, STATUS_DURATION_SECS
from azdo_branches.core.actions import DeleteBranch
from azdo_branches.logging_config import get_logger
from azdo_branches.models.branch import BranchInfo, BranchStatus, DeletedBranch
from azdo_branches.models.work_item import NOT_FETCHED, NotFetched, WorkItemStatus
from azdo_branches.services.branch_validation_service import BranchValidationService

logger = get_logger(__name__)


@dataclass(frozen=True)
class NormalMode:
    pass


@dataclass(frozen=True)
class ConfirmDelete:
    branch_name: str


@dataclass(frozen=True)
class ErrorPopup:
    message: str


AppMode = Union[NormalMode, ConfirmDelete, ErrorPopup]
NORMAL = NormalMode()


@dataclass(frozen=True)
class StatusMessage:
    text: str
    is_error: bool
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class AppState:
    """Branch list, selection, scrolling, modal mode and per-session caches."""

    def __init__(self, branches: List[BranchInfo], show_protected: bool = False,
                 clock: Callable[[], float] = time.monotonic):
        self.branches: List[BranchInfo] = list(branches)
        self.show_protected = show_protected
        self.visible: List[BranchInfo] = []
        self.selected_index = 0

        # Details pane scrolling, heights in lines
        self.scroll_offset = 0
        self.content_height = 0
        self.visible_height = 0

        self.mode: AppMode = NORMAL
        self.status_message: Optional[StatusMessage] = None
        self.work_item_statuses: Dict[int, WorkItemStatus] = {}
        self.branch_statuses: Dict[str, BranchStatus] = {}
        self.deleted_branches: List[DeletedBranch] = []
        self.should_quit = False
        self._clock = clock

        self._refresh_visible()

    # -- selection ---------------------------------------------------------

    def _refresh_visible(self) -> None:
        """Recompute the visible list, keeping the selection on the same branch if possible."""
        previous = self.selected_branch()
        self.visible = [b for b in self.branches if self.show_protected or not b.is_protected]

        if previous is not None:
            for index, branch in enumerate(self.visible):
                if branch.name == previous.name:
                    self.selected_index = index
                    return

        self.selected_index = min(self.selected_index, max(0, len(self.visible) - 1))
        if self.selected_branch() is not previous:
            self.scroll_offset = 0

    def selected_branch(self) -> Optional[BranchInfo]:
        if 0 <= self.selected_index < len(self.visible):
            return self.visible[self.selected_index]
        return None

    def selected_work_item_id(self) -> Optional[int]:
        branch = self.selected_branch()
        return branch.work_item_id if branch else None

    def current_branch_has_work_item(self) -> bool:
        return self.selected_work_item_id() is not None

    def next(self) -> None:
        if not self.visible:
            return
        self.selected_index = (self.selected_index + 1) % len(self.visible)
        self.scroll_offset = 0

    def previous(self) -> None:
        if not self.visible:
            return
        self.selected_index = (self.selected_index - 1) % len(self.visible)
        self.scroll_offset = 0

    def select(self, index: int) -> None:
        if not self.visible:
            return
        index = max(0, min(index, len(self.visible) - 1))
        if index != self.selected_index:
            self.selected_index = index
            self.scroll_offset = 0

    def toggle_show_protected(self) -> None:
        self.show_protected = not self.show_protected
        self._refresh_visible()

    # -- details scrolling -------------------------------------------------

    def max_scroll(self) -> int:
        return max(0, self.content_height - self.visible_height)

    def scroll_down(self, amount: int = LINE_SCROLL_AMOUNT) -> None:
        self.scroll_offset = min(self.scroll_offset + amount, self.max_scroll())

    def scroll_up(self, amount: int = LINE_SCROLL_AMOUNT) -> None:
        self.scroll_offset = max(0, self.scroll_offset - amount)

    def page_size(self) -> int:
        return self.visible_height // PAGE_SCROLL_DIVISOR

    def set_content_height(self, height: int) -> None:
        self.content_height = max(0, height)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll())

    def set_visible_height(self, height: int) -> None:
        self.visible_height = max(0, height)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll())

    # -- work items and branch statuses ------------------------------------

    def work_item_status(self, work_item_id: int) -> WorkItemStatus:
        return self.work_item_statuses.get(work_item_id, NOT_FETCHED)

    def set_work_item_status(self, work_item_id: int, status: WorkItemStatus) -> None:
        if isinstance(status, NotFetched):
            self.work_item_statuses.pop(work_item_id, None)
        else:
            self.work_item_statuses[work_item_id] = status

    def branch_status(self, branch_name: str) -> Optional[BranchStatus]:
        return self.branch_statuses.get(branch_name)

    def set_branch_status(self, branch_name: str, status: BranchStatus) -> None:
        self.branch_statuses[branch_name] = status

    def needs_branch_status(self, branch_name: str) -> bool:
        return branch_name not in self.branch_statuses

    # -- status messages ---------------------------------------------------

    def set_status(self, text: str, is_error: bool = False,
                   duration: float = STATUS_DURATION_SECS) -> None:
        self.status_message = StatusMessage(text, is_error, self._clock() + duration)

    def current_status(self) -> Optional[StatusMessage]:
        """The live status message, if any; an expired one is never returned."""
        message = self.status_message
        if message is None or message.is_expired(self._clock()):
            return None
        return message

    def clear_expired_status(self) -> None:
        if self.status_message is not None and self.status_message.is_expired(self._clock()):
            self.status_message = None

    # -- modes -------------------------------------------------------------

    def is_normal_mode(self) -> bool:
        return isinstance(self.mode, NormalMode)

    def request_delete(self, force: bool = False) -> Optional[DeleteBranch]:
        """
        Start deleting the selected branch.

        Refused deletions only set an error status. Otherwise this enters the
        confirmation mode, or with ``force`` returns the action right away.
        """
        branch = self.selected_branch()
        if branch is None:
            return None

        refusal = BranchValidationService.deletion_refusal(branch)
        if refusal:
            self.set_status(refusal, is_error=True)
            return None

        if force:
            return DeleteBranch(branch.name)
        self.mode = ConfirmDelete(branch.name)
        return None

    def confirm_delete(self) -> Optional[DeleteBranch]:
        if not isinstance(self.mode, ConfirmDelete):
            return None
        action = DeleteBranch(self.mode.branch_name)
        self.mode = NORMAL
        return action

    def cancel_mode(self) -> None:
        self.mode = NORMAL

    def show_error(self, message: str) -> None:
        self.mode = ErrorPopup(message)

    def quit(self) -> None:
        self.should_quit = True

    # -- results of git operations -----------------------------------------

    def record_deleted_branch(self, branch_name: str, commit_sha: str) -> None:
        deleted = DeletedBranch(branch_name, commit_sha)
        self.deleted_branches.append(deleted)
        self.branches = [b for b in self.branches if b.name != branch_name]
        self.branch_statuses.pop(branch_name, None)
        self._refresh_visible()
        self.set_status(f"Deleted {branch_name} (was {deleted.short_sha})")
        logger.debug(f"Recorded deletion of {branch_name} at {commit_sha}")

    def update_current_branch(self, branch_name: str) -> None:
        for branch in self.branches:
            branch.is_current = branch.name == branch_name
        self.set_status(f"Switched to branch '{branch_name}'")

    def deleted_summary_lines(self) -> List[str]:
        return [deleted.restore_hint() for deleted in self.deleted_branches]
