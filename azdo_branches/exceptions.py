"""Custom exceptions for azdo-branches"""

from typing import Optional


class AzdoBranchesError(Exception):
    """Base exception for all azdo-branches errors."""
    pass


class ConfigError(AzdoBranchesError):
    """Configuration is missing, unreadable or incomplete."""
    pass


class GitOperationError(AzdoBranchesError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NotAGitRepositoryError(GitOperationError):
    """Exception raised when no repository contains the working directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("open_repository", message=f"Not a git repository (or any parent of {path})")


class BranchNotFoundError(GitOperationError):
    """Exception raised when a branch is not found."""

    def __init__(self, branch: str):
        super().__init__("find_branch", branch, "Branch not found")


class BranchProtectedError(GitOperationError):
    """Exception raised when attempting to modify a protected branch."""

    def __init__(self, branch: str):
        super().__init__("delete_branch", branch, "Branch is protected")

    def __str__(self) -> str:
        return f"Cannot delete protected branch '{self.branch}'"


class CurrentBranchError(GitOperationError):
    """Exception raised when attempting to delete the checked-out branch."""

    def __init__(self, branch: str):
        super().__init__("delete_branch", branch, "Branch is checked out")

    def __str__(self) -> str:
        return "Cannot delete current branch"


class WorkItemError(AzdoBranchesError):
    """Base exception for work item lookups."""

    def __init__(self, work_item_id: Optional[int], message: Optional[str] = None):
        self.work_item_id = work_item_id
        self.message = message

        # No id for account-level calls such as connection checks
        error_msg = f"Work item #{work_item_id}" if work_item_id is not None else "Azure DevOps"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorkItemNotFoundError(WorkItemError):
    """The work item does not exist or is not visible with this PAT."""

    def __init__(self, work_item_id: int):
        super().__init__(work_item_id, "not found")


class AuthenticationError(WorkItemError):
    """The PAT was rejected."""

    def __init__(self, work_item_id: Optional[int], status_code: Optional[int] = None):
        self.status_code = status_code
        detail = "authentication failed, check that the PAT is valid and has 'Work Items (Read)' scope"
        if status_code:
            detail += f" (HTTP {status_code})"
        super().__init__(work_item_id, detail)


class WorkItemFetchError(WorkItemError):
    """Any other failure: transport, server error, malformed payload."""
    pass
