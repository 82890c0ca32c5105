"""Services for azdo-branches: git, Azure DevOps, background fetching and console output."""

from .git_service import GitService, extract_work_item_id
from .azure_devops_service import AzureDevOpsService
from .fetch_service import FetchOrchestrator, WorkItemFetched, WorkItemFetchFailed
from .branch_validation_service import BranchValidationService
from .display_service import DisplayService

__all__ = [
    "GitService",
    "extract_work_item_id",
    "AzureDevOpsService",
    "FetchOrchestrator",
    "WorkItemFetched",
    "WorkItemFetchFailed",
    "BranchValidationService",
    "DisplayService",
]
