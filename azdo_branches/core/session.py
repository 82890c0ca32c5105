"""Loop driver for the interactive session.

``BranchSession`` ties the state to its collaborators. The UI calls ``tick``
on a short interval and ``dispatch`` with whatever ``handle_key`` returned.
"""
import webbrowser
from typing import Callable, Iterable, List

from azdo_branches.core.actions import (
    Action,
    CheckoutBranch,
    DeleteBranch,
    OpenWorkItem,
    RefreshWorkItem,
)
from azdo_branches.core.app_state import AppState
from azdo_branches.exceptions import GitOperationError
from azdo_branches.logging_config import get_logger
from azdo_branches.models.branch import BranchInfo
from azdo_branches.models.work_item import Loaded
from azdo_branches.services.fetch_service import FetchOrchestrator
from azdo_branches.services.git_service import GitService, extract_work_item_id
from azdo_branches.utils.pattern import is_protected

logger = get_logger(__name__)


def build_branch_infos(git_service: GitService, protected_patterns: Iterable[str]) -> List[BranchInfo]:
    """
    List local branches with their work item ids and flags.

    Args:
        git_service: Repository to read
        protected_patterns: Glob patterns of protected branches

    Returns:
        BranchInfo per local branch, sorted by name
    """
    patterns = list(protected_patterns)
    current = git_service.current_branch()
    return [
        BranchInfo(
            name=name,
            work_item_id=extract_work_item_id(name),
            is_current=name == current,
            is_protected=is_protected(name, patterns),
        )
        for name in git_service.list_branches()
    ]


class BranchSession:
    """Runs the per-tick housekeeping and the actions returned by key handling."""

    def __init__(
        self,
        state: AppState,
        git_service: GitService,
        fetcher: FetchOrchestrator,
        protected_patterns: Iterable[str],
        open_url: Callable[[str], bool] = webbrowser.open,
    ):
        self.state = state
        self.git_service = git_service
        self.fetcher = fetcher
        self.protected_patterns = list(protected_patterns)
        self.open_url = open_url

    def tick(self) -> None:
        """One loop iteration, minus drawing and input."""
        state = self.state
        state.clear_expired_status()
        self.fetcher.drain(state)
        self.fetcher.trigger_for_selection(state)

        # Synchronous: a local git lookup is fast enough for the loop thread
        branch = state.selected_branch()
        if branch is not None and state.needs_branch_status(branch.name):
            state.set_branch_status(branch.name, self.git_service.get_branch_status(branch.name))

    def dispatch(self, action: Action) -> None:
        if isinstance(action, DeleteBranch):
            self._delete_branch(action.branch_name)
        elif isinstance(action, CheckoutBranch):
            self._checkout_branch(action.branch_name)
        elif isinstance(action, RefreshWorkItem):
            self.fetcher.refresh(self.state, action.work_item_id)
            self.state.set_status(f"Refreshing work item #{action.work_item_id}")
        elif isinstance(action, OpenWorkItem):
            self._open_work_item()

    def _delete_branch(self, branch_name: str) -> None:
        try:
            sha = self.git_service.delete_branch(branch_name, self.protected_patterns)
        except GitOperationError as e:
            logger.debug(f"Delete of {branch_name} refused: {e}")
            self.state.set_status(str(e), is_error=True)
            return
        self.state.record_deleted_branch(branch_name, sha)

    def _checkout_branch(self, branch_name: str) -> None:
        try:
            self.git_service.checkout_branch(branch_name)
        except GitOperationError as e:
            logger.debug(f"Checkout of {branch_name} failed: {e}")
            self.state.show_error(str(e))
            return
        self.state.update_current_branch(branch_name)

    def _open_work_item(self) -> None:
        state = self.state
        work_item_id = state.selected_work_item_id()
        if work_item_id is None:
            state.set_status("No work item linked to this branch", is_error=True)
            return

        status = state.work_item_status(work_item_id)
        if not isinstance(status, Loaded):
            state.set_status(f"Work item #{work_item_id} is not loaded", is_error=True)
            return
        if not status.work_item.url:
            state.set_status(f"Work item #{work_item_id} has no web URL", is_error=True)
            return

        try:
            opened = self.open_url(status.work_item.url)
        except webbrowser.Error as e:
            logger.debug(f"Browser error opening {status.work_item.url}: {e}")
            opened = False

        if opened:
            state.set_status(f"Opened #{work_item_id} in browser")
        else:
            state.set_status("Could not open a browser", is_error=True)
