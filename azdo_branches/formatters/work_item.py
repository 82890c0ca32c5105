"""Work item details formatting for the details pane."""

from typing import List, Optional

from rich.style import Style
from rich.text import Text

from azdo_branches.constants import Theme, SYMBOL_SEPARATOR
from azdo_branches.formatters.html import render_html
from azdo_branches.formatters.text import append_wrapped_text
from azdo_branches.models.work_item import (
    FetchFailed,
    Loaded,
    WorkItem,
    WorkItemStatus,
)

TITLE_STYLE = Theme.TEXT + Style(bold=True, underline=True)
FIELD_INDENT = "    "


def format_no_work_item() -> List[Text]:
    return [
        Text(""),
        Text("  No work item linked to this branch", style=Theme.MUTED + Style(italic=True)),
    ]


def format_work_item(work_item: WorkItem, max_width: int) -> List[Text]:
    """
    Lay out a loaded work item.

    Args:
        work_item: The work item to show
        max_width: Usable width of the pane (already reduced by its padding)

    Returns:
        One Text per pane line
    """
    lines = [
        Text(""),
        Text.assemble(
            "  ",
            (f"#{work_item.id} ", Theme.ACCENT + Style(bold=True)),
            f"{work_item.work_item_type.icon} {work_item.work_item_type.display_name}",
        ),
    ]

    meta = Text.assemble(
        "  ",
        (f"{work_item.state.icon} {work_item.state.display_name}", Style(color=work_item.state.color)),
    )
    if work_item.assigned_to:
        meta.append(SYMBOL_SEPARATOR, style=Theme.MUTED)
        meta.append(work_item.assigned_to, style=Theme.TEXT)
    if work_item.tags:
        meta.append(SYMBOL_SEPARATOR, style=Theme.MUTED)
        meta.append(", ".join(work_item.tags), style=Theme.TAGS)
    lines.append(meta)

    lines.append(Text(""))
    append_wrapped_text(lines, work_item.title, max_width, TITLE_STYLE)

    for field in work_item.rich_text_fields:
        lines.append(Text(""))
        lines.append(Text(f"  {field.name}:", style=Theme.MUTED))
        for rendered in render_html(field.value, max(0, max_width - len(FIELD_INDENT))):
            line = rendered.to_text()
            line.pad_left(len(FIELD_INDENT))
            lines.append(line)

    return lines


def format_work_item_details(
    work_item_id: Optional[int],
    status: Optional[WorkItemStatus],
    max_width: int,
) -> List[Text]:
    """
    Build the details pane content for the selected branch.

    Args:
        work_item_id: Id linked to the selected branch, if any
        status: Fetch status for that id (None when never fetched)
        max_width: Usable width of the pane

    Returns:
        One Text per pane line
    """
    if work_item_id is None:
        return format_no_work_item()

    if isinstance(status, Loaded):
        return format_work_item(status.work_item, max_width)

    if isinstance(status, FetchFailed):
        lines = [Text("")]
        append_wrapped_text(lines, f"Error: {status.message}", max_width, Style(color="red"))
        return lines

    # Not fetched yet or in flight
    return [Text(""), Text("  Loading work item...", style=Theme.WARNING)]
