"""Tests for background work item fetching"""
import threading
import time
from unittest.mock import Mock

import pytest

from azdo_branches.core.app_state import AppState
from azdo_branches.core.session import BranchSession
from azdo_branches.exceptions import WorkItemNotFoundError
from azdo_branches.models.branch import BranchInfo, BranchStatus, RemoteStatus
from azdo_branches.models.work_item import FetchFailed, Loaded, Loading, NotFetched
from azdo_branches.services.fetch_service import (
    FetchOrchestrator,
    WorkItemFetched,
    WorkItemFetchFailed,
)


def drain_until(fetcher, state, expected=1, timeout=5.0):
    """Drain repeatedly until ``expected`` results were merged or time runs out."""
    merged = 0
    deadline = time.monotonic() + timeout
    while merged < expected and time.monotonic() < deadline:
        merged += fetcher.drain(state)
        if merged < expected:
            time.sleep(0.01)
    return merged


@pytest.fixture
def state():
    return AppState([
        BranchInfo("feature/123-login", work_item_id=123),
        BranchInfo("chore/cleanup"),
    ])


@pytest.fixture
def fetcher(mock_client):
    orchestrator = FetchOrchestrator(mock_client, max_workers=2)
    yield orchestrator
    orchestrator.shutdown()


class TestFetchRequest:
    """Test request bookkeeping."""

    def test_request_marks_loading(self, fetcher, state):
        assert fetcher.request(state, 123) is True

        assert isinstance(state.work_item_status(123), Loading)
        assert fetcher.is_pending(123)

    def test_no_duplicate_request(self, fetcher, state, mock_client):
        fetcher.request(state, 123)
        assert fetcher.request(state, 123) is False

        drain_until(fetcher, state)
        assert fetcher.request(state, 123) is False
        assert mock_client.get_work_item.call_count == 1

    def test_failed_id_is_not_retried(self, fetcher, state):
        state.set_work_item_status(123, FetchFailed("boom"))
        assert fetcher.request(state, 123) is False

    def test_trigger_for_selection(self, fetcher, state, mock_client):
        assert fetcher.trigger_for_selection(state) is True
        drain_until(fetcher, state)

        mock_client.get_work_item.assert_called_once_with(123)

    def test_trigger_without_work_item(self, fetcher, state):
        state.next()
        assert fetcher.trigger_for_selection(state) is False

    def test_request_after_shutdown(self, fetcher, state):
        fetcher.shutdown()

        assert fetcher.request(state, 123) is False
        assert isinstance(state.work_item_status(123), NotFetched)


class TestFetchResults:
    """Test merging results into the state."""

    def test_success_is_merged(self, fetcher, state, sample_work_item):
        fetcher.request(state, 123)

        assert drain_until(fetcher, state) == 1
        status = state.work_item_status(123)
        assert isinstance(status, Loaded)
        assert status.work_item == sample_work_item
        assert not fetcher.is_pending(123)

    def test_work_item_error_becomes_failed(self, state):
        client = Mock()
        client.get_work_item.side_effect = WorkItemNotFoundError(123)
        fetcher = FetchOrchestrator(client, max_workers=1)
        try:
            fetcher.request(state, 123)
            drain_until(fetcher, state)
        finally:
            fetcher.shutdown()

        status = state.work_item_status(123)
        assert isinstance(status, FetchFailed)
        assert status.message == "Work item #123: not found"

    def test_unexpected_error_becomes_failed(self, state):
        client = Mock()
        client.get_work_item.side_effect = RuntimeError("kaput")
        fetcher = FetchOrchestrator(client, max_workers=1)
        try:
            fetcher.request(state, 123)
            drain_until(fetcher, state)
        finally:
            fetcher.shutdown()

        status = state.work_item_status(123)
        assert isinstance(status, FetchFailed)
        assert "kaput" in status.message

    def test_drain_with_empty_inbox(self, fetcher, state):
        assert fetcher.drain(state) == 0

    def test_result_without_pending_request_is_dropped(self, fetcher, state, sample_work_item):
        fetcher.inbox.put(WorkItemFetched(123, 42, sample_work_item))

        assert fetcher.drain(state) == 0
        assert isinstance(state.work_item_status(123), NotFetched)

    def test_result_with_old_token_is_dropped(self, fetcher, state):
        fetcher.pending[123] = 7
        state.set_work_item_status(123, Loading())
        fetcher.inbox.put(WorkItemFetchFailed(123, 6, "old"))

        assert fetcher.drain(state) == 0
        assert isinstance(state.work_item_status(123), Loading)
        assert fetcher.pending[123] == 7


class TestFetchCancelAndRefresh:
    """Test that superseded results never reach the state."""

    def test_cancelled_result_is_dropped(self, state, sample_work_item):
        release = threading.Event()

        def slow_get(work_item_id):
            release.wait(5)
            return sample_work_item

        client = Mock()
        client.get_work_item.side_effect = slow_get
        fetcher = FetchOrchestrator(client, max_workers=1)
        try:
            fetcher.request(state, 123)
            fetcher.cancel(state, 123)
            assert isinstance(state.work_item_status(123), NotFetched)

            release.set()
            result = fetcher.inbox.get(timeout=5)
            fetcher.inbox.put(result)

            assert fetcher.drain(state) == 0
            assert isinstance(state.work_item_status(123), NotFetched)
        finally:
            release.set()
            fetcher.shutdown()

    def test_refresh_refetches(self, fetcher, state, mock_client):
        fetcher.request(state, 123)
        drain_until(fetcher, state)

        assert fetcher.refresh(state, 123) is True
        assert isinstance(state.work_item_status(123), Loading)

        drain_until(fetcher, state)
        assert isinstance(state.work_item_status(123), Loaded)
        assert mock_client.get_work_item.call_count == 2

    def test_refresh_of_failed_item(self, fetcher, state):
        state.set_work_item_status(123, FetchFailed("boom"))

        assert fetcher.refresh(state, 123) is True
        drain_until(fetcher, state)
        assert isinstance(state.work_item_status(123), Loaded)

    def test_refresh_without_id(self, fetcher, state):
        assert fetcher.refresh(state, None) is False


class TestFetchDuringNavigation:
    """Test selection changes while a fetch is still running."""

    def test_moving_away_and_back_fetches_once(self, state, sample_work_item):
        release = threading.Event()

        def slow_get(work_item_id):
            release.wait(5)
            return sample_work_item

        client = Mock()
        client.get_work_item.side_effect = slow_get
        git_service = Mock()
        git_service.get_branch_status.return_value = BranchStatus(RemoteStatus.local_only())
        fetcher = FetchOrchestrator(client, max_workers=2)
        session = BranchSession(state, git_service, fetcher, ["main"], open_url=Mock())
        try:
            session.tick()
            for _ in range(3):
                state.next()
                session.tick()
                state.previous()
                session.tick()
            assert isinstance(state.work_item_status(123), Loading)

            release.set()
            assert drain_until(fetcher, state) == 1
            session.tick()
        finally:
            release.set()
            fetcher.shutdown()

        assert client.get_work_item.call_count == 1
        assert isinstance(state.work_item_status(123), Loaded)
