"""Branch model and related enums"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class SyncStatus(Enum):
    """Sync status of a branch with its upstream."""
    UP_TO_DATE = "up-to-date"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    LOCAL_ONLY = "local-only"
    GONE = "gone"  # Upstream configured but the remote ref no longer exists


@dataclass(frozen=True)
class RemoteStatus:
    """Remote tracking classification, with commit counts where they apply."""
    kind: SyncStatus
    ahead: int = 0
    behind: int = 0

    @classmethod
    def from_counts(cls, ahead: int, behind: int) -> "RemoteStatus":
        """Classify a branch from its ahead/behind counts against the upstream."""
        if ahead and behind:
            return cls(SyncStatus.DIVERGED, ahead, behind)
        if ahead:
            return cls(SyncStatus.AHEAD, ahead=ahead)
        if behind:
            return cls(SyncStatus.BEHIND, behind=behind)
        return cls(SyncStatus.UP_TO_DATE)

    @classmethod
    def local_only(cls) -> "RemoteStatus":
        return cls(SyncStatus.LOCAL_ONLY)

    @classmethod
    def gone(cls) -> "RemoteStatus":
        return cls(SyncStatus.GONE)


@dataclass(frozen=True)
class BranchStatus:
    """Remote status plus last commit metadata for one branch."""
    remote_status: RemoteStatus
    last_commit_author: Optional[str] = None
    last_commit_time: Optional[int] = None  # Unix timestamp


@dataclass
class BranchInfo:
    """A local branch as shown in the branch list."""
    name: str
    work_item_id: Optional[int] = None
    is_current: bool = False
    is_protected: bool = False


@dataclass(frozen=True)
class DeletedBranch:
    """A branch deleted during the session, kept for the recovery summary."""
    name: str
    commit_sha: str

    @property
    def short_sha(self) -> str:
        return self.commit_sha[:7]

    def restore_hint(self) -> str:
        return (
            f"{self.name} (was {self.short_sha}) - restore: "
            f"git checkout -b {self.name} {self.commit_sha}"
        )
