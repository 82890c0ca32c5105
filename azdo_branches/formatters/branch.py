"""Branch list, branch info and footer formatting."""

from typing import List, Optional

from rich.style import Style
from rich.text import Text

from azdo_branches.constants import (
    Theme,
    SYMBOL_CURRENT_BRANCH,
    SYMBOL_NOT_CURRENT,
    SYMBOL_PROTECTED,
    SYMBOL_INFO_SEPARATOR,
)
from azdo_branches.formatters.date import format_relative_time
from azdo_branches.formatters.status import format_remote_status
from azdo_branches.models.branch import BranchInfo, BranchStatus


def format_branch_label(branch: BranchInfo) -> Text:
    """
    Format one row of the branch list.

    Example:
        "* feature/123-login 🔒 [#123]"
    """
    prefix = SYMBOL_CURRENT_BRANCH if branch.is_current else SYMBOL_NOT_CURRENT
    label = f"{prefix}{branch.name}"
    if branch.is_protected:
        label += SYMBOL_PROTECTED
    if branch.work_item_id is not None:
        label += f" [#{branch.work_item_id}]"

    if branch.is_current:
        style = Theme.CURRENT_BRANCH
    elif branch.is_protected:
        style = Theme.MUTED
    else:
        style = Style()
    return Text(label, style=style)


def format_branch_info(
    branch: Optional[BranchInfo],
    status: Optional[BranchStatus],
    now: Optional[float] = None,
) -> List[Text]:
    """Lines for the branch info pane: name, then remote status and last commit."""
    if branch is None:
        return []

    lines = [Text.assemble("  ", (branch.name, Theme.CURRENT_BRANCH))]
    if status is None:
        lines.append(Text("  Loading...", style=Theme.MUTED))
        return lines

    remote_text, remote_color = format_remote_status(status.remote_status)
    line = Text.assemble(("  Remote: ", Theme.MUTED), (remote_text, Style(color=remote_color)))
    if status.last_commit_author is not None and status.last_commit_time is not None:
        line.append(SYMBOL_INFO_SEPARATOR, style=Theme.MUTED)
        line.append(status.last_commit_author, style=Theme.TEXT)
        line.append(", ", style=Theme.MUTED)
        line.append(format_relative_time(status.last_commit_time, now), style=Theme.MUTED)
    lines.append(line)
    return lines


def format_key_hints(show_protected: bool, refresh_available: bool) -> Text:
    """Footer key hints; the refresh hint is dimmed when there is nothing to refresh."""
    refresh_key = Theme.ACCENT if refresh_available else Theme.MUTED
    refresh_text = Theme.MUTED if refresh_available else Theme.MUTED + Style(dim=True)
    protected_prefix = "hide " if show_protected else "show "

    return Text.assemble(
        (" j/k ", Theme.ACCENT),
        ("navigate  ", Theme.MUTED),
        ("o", Theme.ACCENT),
        ("pen  ", Theme.MUTED),
        ("pg↑↓ ", Theme.ACCENT),
        ("scroll  ", Theme.MUTED),
        ("d", Theme.ACCENT),
        ("elete  ", Theme.MUTED),
        ("r", refresh_key),
        ("efresh  ", refresh_text),
        (protected_prefix, Theme.MUTED),
        ("p", Theme.ACCENT),
        ("rotected  ", Theme.MUTED),
        ("q", Theme.ACCENT),
        ("uit", Theme.MUTED),
    )
