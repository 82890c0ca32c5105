"""Tests for AzureDevOpsService"""
from unittest.mock import Mock

import pytest
import requests

from azdo_branches.exceptions import (
    AuthenticationError,
    WorkItemFetchError,
    WorkItemNotFoundError,
)
from azdo_branches.models.work_item import WorkItemKind
from azdo_branches.services.azure_devops_service import AzureDevOpsService


def make_response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def http():
    return Mock()


@pytest.fixture
def service(http):
    return AzureDevOpsService("https://dev.azure.com/myorg/", "secret-pat", timeout=5, session=http)


class TestAzureDevOpsServiceInit:
    """Test client setup."""

    def test_basic_auth_with_empty_user(self, service, http):
        assert http.auth == ("", "secret-pat")
        http.headers.update.assert_called_once_with({"Accept": "application/json"})

    def test_work_item_url(self, service):
        assert service.work_item_url(42) == (
            "https://dev.azure.com/myorg/_apis/wit/workitems/42?api-version=7.0"
        )


class TestGetWorkItem:
    """Test fetching work items and mapping failures."""

    def test_success(self, service, http, work_item_payload):
        http.get.return_value = make_response(200, work_item_payload)

        work_item = service.get_work_item(123)

        http.get.assert_called_once_with(service.work_item_url(123), timeout=5)
        assert work_item.id == 123
        assert work_item.work_item_type.kind == WorkItemKind.BUG

    def test_not_found(self, service, http):
        http.get.return_value = make_response(404)

        with pytest.raises(WorkItemNotFoundError) as exc_info:
            service.get_work_item(999)
        assert str(exc_info.value) == "Work item #999: not found"

    @pytest.mark.parametrize("status_code", [401, 403, 203])
    def test_authentication_failures(self, service, http, status_code):
        http.get.return_value = make_response(status_code, text="<html>sign in</html>")

        with pytest.raises(AuthenticationError) as exc_info:
            service.get_work_item(1)

        assert exc_info.value.status_code == status_code
        assert "PAT" in str(exc_info.value)

    def test_server_error(self, service, http):
        http.get.return_value = make_response(500, text="  internal failure  ")

        with pytest.raises(WorkItemFetchError, match=r"\(500\): internal failure"):
            service.get_work_item(1)

    def test_transport_error(self, service, http):
        http.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(WorkItemFetchError, match="request failed"):
            service.get_work_item(1)

    def test_timeout(self, service, http):
        http.get.side_effect = requests.Timeout("timed out")

        with pytest.raises(WorkItemFetchError):
            service.get_work_item(1)

    def test_invalid_json(self, service, http):
        http.get.return_value = make_response(200, ValueError("Expecting value"))

        with pytest.raises(WorkItemFetchError, match="not valid JSON"):
            service.get_work_item(1)

    def test_unexpected_shape(self, service, http):
        http.get.return_value = make_response(200, ["not", "a", "dict"])

        with pytest.raises(WorkItemFetchError, match="unexpected response shape"):
            service.get_work_item(1)

    def test_missing_required_field(self, service, http, work_item_payload):
        del work_item_payload["fields"]["System.Title"]
        http.get.return_value = make_response(200, work_item_payload)

        with pytest.raises(WorkItemFetchError, match="failed to parse work item"):
            service.get_work_item(123)


class TestVerify:
    """Test the connection check."""

    def test_returns_first_project(self, service, http):
        http.get.return_value = make_response(200, {"count": 1, "value": [{"name": "Website"}]})

        assert service.verify() == "Website"
        url = http.get.call_args[0][0]
        assert url.startswith("https://dev.azure.com/myorg/_apis/projects?$top=1")

    def test_no_projects(self, service, http):
        http.get.return_value = make_response(200, {"count": 0, "value": []})
        assert service.verify() == ""

    def test_rejected_pat(self, service, http):
        http.get.return_value = make_response(401)

        with pytest.raises(AuthenticationError) as exc_info:
            service.verify()

        assert exc_info.value.work_item_id is None
        assert str(exc_info.value).startswith("Azure DevOps: authentication failed")
