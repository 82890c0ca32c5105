"""Git operations service"""
import re
from typing import Iterable, List, Optional

import git

from azdo_branches.exceptions import (
    BranchNotFoundError,
    BranchProtectedError,
    CurrentBranchError,
    GitOperationError,
    NotAGitRepositoryError,
)
from azdo_branches.logging_config import get_logger
from azdo_branches.models.branch import BranchStatus, RemoteStatus
from azdo_branches.utils.pattern import is_protected

logger = get_logger(__name__)

_WORK_ITEM_ID_RE = re.compile(r"\d+")


def extract_work_item_id(branch_name: str) -> Optional[int]:
    """
    Extract the work item id from a branch name.

    The id is the first run of decimal digits, when it is a positive integer.

    Examples:
        "feature/123-login" -> 123
        "bugfix/v2-456" -> 2
        "main" -> None
    """
    match = _WORK_ITEM_ID_RE.search(branch_name)
    if not match:
        return None
    value = int(match.group(0))
    return value if value > 0 else None


class GitService:
    """Service for Git operations on one repository."""

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Path to the repository working tree (or git dir for bare repos)
        """
        self.repo_path = repo_path
        logger.debug(f"Git service initialized for {repo_path}")

    @classmethod
    def discover(cls, path: str = ".") -> "GitService":
        """
        Open the repository containing ``path``, searching parent directories.

        Raises:
            NotAGitRepositoryError: If no repository contains ``path``
        """
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            logger.debug(f"Repository discovery failed for {path}: {e}")
            raise NotAGitRepositoryError(path) from e

        try:
            return cls(repo.working_tree_dir or repo.git_dir)
        finally:
            repo.close()

    def _get_repo(self) -> git.Repo:
        """Get a fresh git.Repo instance.

        GitPython repos are lightweight - opening one does not clone anything.
        """
        return git.Repo(self.repo_path)

    def current_branch(self) -> str:
        """
        Get the name of the checked-out branch.

        Returns:
            Branch name, or "(detached HEAD at <sha7>)" when HEAD is detached
        """
        repo = self._get_repo()
        try:
            if repo.head.is_detached:
                return f"(detached HEAD at {repo.head.commit.hexsha[:7]})"
            return repo.active_branch.name
        finally:
            repo.close()

    def list_branches(self) -> List[str]:
        """Get all local branch names, sorted."""
        repo = self._get_repo()
        try:
            return sorted(head.name for head in repo.heads)
        finally:
            repo.close()

    def get_branch_status(self, branch_name: str) -> BranchStatus:
        """
        Get remote tracking status and last commit metadata for a branch.

        Never raises: anything unexpected degrades to a local-only status.
        """
        try:
            repo = self._get_repo()
        except Exception as e:
            logger.debug(f"Could not open repository for {branch_name}: {e}")
            return BranchStatus(RemoteStatus.local_only())

        try:
            head = repo.heads[branch_name]
            commit = head.commit
            author = commit.author.name if commit.author else None
            commit_time = int(commit.committed_date)

            tracking = head.tracking_branch()
            if tracking is None:
                remote_status = RemoteStatus.local_only()
            elif not tracking.is_valid():
                remote_status = RemoteStatus.gone()
            else:
                ahead = sum(1 for _ in repo.iter_commits(f"{tracking.path}..{head.path}"))
                behind = sum(1 for _ in repo.iter_commits(f"{head.path}..{tracking.path}"))
                remote_status = RemoteStatus.from_counts(ahead, behind)

            return BranchStatus(remote_status, author, commit_time)
        except Exception as e:
            logger.debug(f"Error getting status for {branch_name}: {e}")
            return BranchStatus(RemoteStatus.local_only())
        finally:
            repo.close()

    def delete_branch(self, branch_name: str, protected_patterns: Iterable[str]) -> str:
        """
        Delete a local branch, even if it is not merged.

        Args:
            branch_name: Name of the branch to delete
            protected_patterns: Glob patterns of branches that must never be deleted

        Returns:
            Full sha the branch pointed at, for recovery

        Raises:
            CurrentBranchError: If the branch is checked out
            BranchProtectedError: If the branch matches a protected pattern
            BranchNotFoundError: If there is no such local branch
            GitOperationError: If git refuses the deletion
        """
        repo = self._get_repo()
        try:
            if not repo.head.is_detached and repo.active_branch.name == branch_name:
                raise CurrentBranchError(branch_name)
            if is_protected(branch_name, protected_patterns):
                raise BranchProtectedError(branch_name)

            try:
                head = repo.heads[branch_name]
            except IndexError:
                raise BranchNotFoundError(branch_name)

            sha = head.commit.hexsha
            try:
                repo.delete_head(head, force=True)
            except git.GitCommandError as e:
                raise GitOperationError("delete_branch", branch_name, _git_error_message(e)) from e

            logger.debug(f"Deleted branch {branch_name} at {sha}")
            return sha
        finally:
            repo.close()

    def checkout_branch(self, branch_name: str) -> None:
        """
        Check out a local branch.

        Raises:
            BranchNotFoundError: If there is no such local branch
            GitOperationError: If git refuses, e.g. local changes would be overwritten
        """
        repo = self._get_repo()
        try:
            try:
                head = repo.heads[branch_name]
            except IndexError:
                raise BranchNotFoundError(branch_name)

            try:
                head.checkout()
            except git.GitCommandError as e:
                raise GitOperationError("checkout", branch_name, _git_error_message(e)) from e

            logger.debug(f"Checked out {branch_name}")
        finally:
            repo.close()


def _git_error_message(error: git.GitCommandError) -> str:
    """Prefer git's own stderr over GitPython's command dump."""
    stderr = (error.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip()
    stderr = stderr.strip("'").strip()
    return stderr or str(error)
