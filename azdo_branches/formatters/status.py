"""Remote status formatting utilities."""

from typing import Tuple

from azdo_branches.models.branch import RemoteStatus, SyncStatus
from azdo_branches.constants import REMOTE_STATUS_COLORS


def format_remote_status(status: RemoteStatus) -> Tuple[str, str]:
    """
    Format a branch's remote status for display.

    Args:
        status: Remote tracking classification

    Returns:
        Tuple of (display text, Rich color name)

    Example:
        RemoteStatus(SyncStatus.DIVERGED, 2, 1) -> ("↑2 ↓1", "yellow")
    """
    color = REMOTE_STATUS_COLORS[status.kind.value]

    if status.kind == SyncStatus.LOCAL_ONLY:
        return "local only", color
    if status.kind == SyncStatus.UP_TO_DATE:
        return "up to date", color
    if status.kind == SyncStatus.AHEAD:
        return f"↑{status.ahead}", color
    if status.kind == SyncStatus.BEHIND:
        return f"↓{status.behind}", color
    if status.kind == SyncStatus.DIVERGED:
        return f"↑{status.ahead} ↓{status.behind}", color
    return "remote gone", color
