"""Azure DevOps work item service"""
from typing import Any, Dict, Optional

import requests

from azdo_branches.constants import AZURE_DEVOPS_API_VERSION, DEFAULT_REQUEST_TIMEOUT
from azdo_branches.exceptions import (
    AuthenticationError,
    WorkItemFetchError,
    WorkItemNotFoundError,
)
from azdo_branches.logging_config import get_logger
from azdo_branches.models.work_item import WorkItem

logger = get_logger(__name__)


class AzureDevOpsService:
    """Read-only client for the Azure DevOps work item REST API.

    One attempt per call: there is no retry or backoff. The session is shared
    by the fetch workers; ``requests.Session`` is safe for concurrent GETs.
    """

    def __init__(self, organization_url: str, pat: str, timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """Initialize the service.

        Args:
            organization_url: e.g. https://dev.azure.com/myorg (or a TFS collection URL)
            pat: Personal access token with Work Items (Read) scope
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (tests)
        """
        self.base_url = organization_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = ('', pat)
        self.session.headers.update({'Accept': 'application/json'})

    def work_item_url(self, work_item_id: int) -> str:
        return f"{self.base_url}/_apis/wit/workitems/{work_item_id}?api-version={AZURE_DEVOPS_API_VERSION}"

    def _get_json(self, url: str, work_item_id: Optional[int]) -> Dict[str, Any]:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise WorkItemFetchError(work_item_id, f"request failed: {e}") from e

        if response.status_code == 404:
            raise WorkItemNotFoundError(work_item_id)
        if response.status_code in (401, 403):
            raise AuthenticationError(work_item_id, response.status_code)
        if response.status_code == 203:
            # Non-authoritative: Azure DevOps serves its sign-in page instead of JSON
            raise AuthenticationError(work_item_id, response.status_code)
        if not response.ok:
            body = response.text.strip()[:200]
            raise WorkItemFetchError(
                work_item_id, f"Azure DevOps API error ({response.status_code}): {body}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise WorkItemFetchError(work_item_id, "response is not valid JSON") from e
        if not isinstance(payload, dict):
            raise WorkItemFetchError(work_item_id, "unexpected response shape")
        return payload

    def get_work_item(self, work_item_id: int) -> WorkItem:
        """
        Fetch one work item.

        Raises:
            WorkItemNotFoundError: 404
            AuthenticationError: 401/403, or the sign-in page (203)
            WorkItemFetchError: Transport failures, other errors, malformed payloads
        """
        logger.debug(f"Fetching work item #{work_item_id}")
        payload = self._get_json(self.work_item_url(work_item_id), work_item_id)
        try:
            return WorkItem.from_json(payload, work_item_id)
        except ValueError as e:
            raise WorkItemFetchError(work_item_id, f"failed to parse work item: {e}") from e

    def verify(self) -> str:
        """
        Check that the organization URL and PAT work by listing one project.

        Returns:
            Name of the first visible project, or "" if there are none

        Raises:
            WorkItemError subclass describing the failure (without an id)
        """
        url = f"{self.base_url}/_apis/projects?$top=1&api-version={AZURE_DEVOPS_API_VERSION}"
        payload = self._get_json(url, None)
        projects = payload.get('value') or []
        if projects and isinstance(projects[0], dict):
            return str(projects[0].get('name', ''))
        return ''
