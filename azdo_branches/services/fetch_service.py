"""Background work item fetching.

The session loop owns all state. Fetches run on a small thread pool and report
back through a queue that the loop drains on every tick, so worker threads
never touch the application state directly.
"""
import itertools
import queue
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Protocol, Union

from azdo_branches.constants import DEFAULT_FETCH_WORKERS
from azdo_branches.exceptions import WorkItemError
from azdo_branches.logging_config import get_logger
from azdo_branches.models.work_item import (
    LOADING,
    NOT_FETCHED,
    FetchFailed,
    Loaded,
    NotFetched,
    WorkItem,
)

if TYPE_CHECKING:
    from azdo_branches.core.app_state import AppState

logger = get_logger(__name__)


class WorkItemClient(Protocol):
    def get_work_item(self, work_item_id: int) -> WorkItem:
        ...


@dataclass(frozen=True)
class WorkItemFetched:
    work_item_id: int
    token: int
    work_item: WorkItem


@dataclass(frozen=True)
class WorkItemFetchFailed:
    work_item_id: int
    token: int
    message: str


FetchResult = Union[WorkItemFetched, WorkItemFetchFailed]


class FetchOrchestrator:
    """Keeps at most one fetch in flight per work item id.

    ``pending`` maps each in-flight id to the token of its request. A result is
    only merged when its token is still the pending one, so results of
    cancelled or superseded requests are dropped even if the id was requested
    again in the meantime.
    """

    def __init__(self, client: WorkItemClient, max_workers: int = DEFAULT_FETCH_WORKERS):
        self.client = client
        self.inbox: "queue.SimpleQueue[FetchResult]" = queue.SimpleQueue()
        self.pending: Dict[int, int] = {}
        self._tokens = itertools.count(1)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="wi-fetch")
        self._closed = False

    def is_pending(self, work_item_id: int) -> bool:
        return work_item_id in self.pending

    def request(self, state: "AppState", work_item_id: int) -> bool:
        """
        Start a fetch unless the id is already loading, loaded, failed or pending.

        Returns:
            True if a fetch was submitted
        """
        if self._closed or work_item_id in self.pending:
            return False
        if not isinstance(state.work_item_status(work_item_id), NotFetched):
            return False

        token = next(self._tokens)
        state.set_work_item_status(work_item_id, LOADING)
        self.pending[work_item_id] = token
        self._executor.submit(self._fetch, work_item_id, token)
        logger.debug(f"Requested work item #{work_item_id} (token {token})")
        return True

    def trigger_for_selection(self, state: "AppState") -> bool:
        """Request the work item of the selected branch, if it has one."""
        work_item_id = state.selected_work_item_id()
        if work_item_id is None:
            return False
        return self.request(state, work_item_id)

    def _fetch(self, work_item_id: int, token: int) -> None:
        """Worker: always puts exactly one result on the inbox."""
        result: FetchResult
        try:
            work_item = self.client.get_work_item(work_item_id)
            result = WorkItemFetched(work_item_id, token, work_item)
        except WorkItemError as e:
            logger.debug(f"Fetch of work item #{work_item_id} failed: {e}")
            result = WorkItemFetchFailed(work_item_id, token, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error fetching work item #{work_item_id}")
            result = WorkItemFetchFailed(work_item_id, token, f"Unexpected error: {e}")
        self.inbox.put(result)

    def drain(self, state: "AppState") -> int:
        """
        Merge every result currently in the inbox. Never blocks.

        Returns:
            Number of results merged into the state
        """
        merged = 0
        while True:
            try:
                result = self.inbox.get_nowait()
            except queue.Empty:
                break

            if self.pending.get(result.work_item_id) != result.token:
                logger.debug(f"Dropping stale result for work item #{result.work_item_id}")
                continue

            del self.pending[result.work_item_id]
            if isinstance(result, WorkItemFetched):
                state.set_work_item_status(result.work_item_id, Loaded(result.work_item))
            else:
                state.set_work_item_status(result.work_item_id, FetchFailed(result.message))
            merged += 1
        return merged

    def cancel(self, state: "AppState", work_item_id: int) -> None:
        """Forget any in-flight fetch for the id and reset it to not fetched."""
        self.pending.pop(work_item_id, None)
        state.set_work_item_status(work_item_id, NOT_FETCHED)

    def refresh(self, state: "AppState", work_item_id: Optional[int]) -> bool:
        """
        Discard what is known about the id and fetch it again.

        Returns:
            True if a new fetch was submitted
        """
        if work_item_id is None:
            return False
        self.cancel(state, work_item_id)
        return self.request(state, work_item_id)

    def shutdown(self) -> None:
        """Stop accepting work without waiting for in-flight requests."""
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
