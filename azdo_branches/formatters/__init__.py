"""Formatting utilities for azdo-branches.

This package turns models into Rich text for the terminal, organized into
logical modules:
- html: work item HTML fields to styled, wrapped lines
- text: plain word wrapping
- date: relative time formatting
- status: remote status formatting
- branch: branch list, branch info and footer lines
- work_item: work item details pane
"""

# HTML rendering
from .html import StyledLine, StyledSpan, decode_html_entities, render_html

# Text
from .text import wrap_text, append_wrapped_text

# Date
from .date import format_relative_time

# Status
from .status import format_remote_status

# Branch
from .branch import format_branch_label, format_branch_info, format_key_hints

# Work item
from .work_item import format_work_item, format_work_item_details

__all__ = [
    # HTML
    "StyledLine",
    "StyledSpan",
    "decode_html_entities",
    "render_html",
    # Text
    "wrap_text",
    "append_wrapped_text",
    # Date
    "format_relative_time",
    # Status
    "format_remote_status",
    # Branch
    "format_branch_label",
    "format_branch_info",
    "format_key_hints",
    # Work item
    "format_work_item",
    "format_work_item_details",
]
