"""One-shot console output for the non-interactive commands"""
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from azdo_branches.config import Config
from azdo_branches.constants import PAT_ENV_VAR, Theme
from azdo_branches.models.work_item import WorkItem

BOX_WIDTH = 60
ERROR_BOX_WIDTH = 70


def _field_grid() -> Table:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style=Theme.MUTED, no_wrap=True)
    grid.add_column(overflow="ellipsis", no_wrap=True)
    return grid


def work_item_panel(work_item: WorkItem, branch: str) -> Panel:
    """Box with the work item's title, type, state and the branch."""
    grid = _field_grid()
    grid.add_row("Title:", Text(work_item.title, style="bold white"))
    grid.add_row("Type:", f"{work_item.work_item_type.icon} {work_item.work_item_type.display_name}")
    grid.add_row("State:", f"{work_item.state.icon} {work_item.state.display_name}")
    grid.add_row("Branch:", Text(branch, style="green"))
    return Panel(
        grid,
        title=f"Work Item #{work_item.id}",
        title_align="left",
        border_style="cyan",
        box=box.ROUNDED,
        width=BOX_WIDTH,
    )


def branch_only_panel(branch: str) -> Panel:
    """Box for a branch whose name carries no work item id."""
    grid = _field_grid()
    grid.add_row("Branch:", Text(branch, style="green"))
    grid.add_row("", Text("No work item number found in branch name", style=Theme.MUTED))
    return Panel(
        grid,
        title="Branch Info",
        title_align="left",
        border_style="yellow",
        box=box.ROUNDED,
        width=BOX_WIDTH,
    )


def error_panel(message: str) -> Panel:
    return Panel(
        Text(message, style="red"),
        title="Error",
        title_align="left",
        border_style="red",
        box=box.ROUNDED,
        width=ERROR_BOX_WIDTH,
    )


class DisplayService:
    """Prints boxes and config summaries to the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_work_item(self, work_item: WorkItem, branch: str) -> None:
        self.console.print(work_item_panel(work_item, branch))

    def show_branch_only(self, branch: str) -> None:
        self.console.print(branch_only_panel(branch))

    def show_error(self, message: str) -> None:
        self.console.print(error_panel(message))

    def show_config(self, config: Config, path: str, pat_from_env: bool) -> None:
        """Print the config without revealing the PAT."""
        if pat_from_env:
            pat_source = f"(set via {PAT_ENV_VAR})"
        elif config.pat:
            pat_source = "(set in config file)"
        else:
            pat_source = "(not set)"

        self.console.print(f"Configuration file: {path}")
        self.console.print()
        self.console.print(f"Azure DevOps Organization URL: {config.organization_url or '(not set)'}")
        self.console.print(f"PAT: {pat_source}")
        self.console.print(f"Protected branches: {', '.join(config.protected_branches)}")
        self.console.print(f"Request timeout: {config.request_timeout}s")
        self.console.print(f"Fetch workers: {config.fetch_workers}")

    def show_deleted_summary(self, lines) -> None:
        """Recovery hints for branches deleted during the session."""
        if not lines:
            return
        self.console.print()
        self.console.print("Deleted branches this session:")
        for line in lines:
            self.console.print(f"  • {line}", markup=False, highlight=False)
