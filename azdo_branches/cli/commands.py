"""Commands behind the azdo-branches CLI."""

import os
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from azdo_branches.config import Config, config_path
from azdo_branches.constants import PAT_ENV_VAR
from azdo_branches.core.app_state import AppState
from azdo_branches.core.session import BranchSession, build_branch_infos
from azdo_branches.exceptions import AzdoBranchesError, ConfigError, WorkItemError
from azdo_branches.logging_config import get_logger
from azdo_branches.services.azure_devops_service import AzureDevOpsService
from azdo_branches.services.display_service import DisplayService
from azdo_branches.services.fetch_service import FetchOrchestrator
from azdo_branches.services.git_service import GitService, extract_work_item_id

logger = get_logger(__name__)


def _client_from_config(config: Config) -> AzureDevOpsService:
    """Resolve the PAT and URL up front so a missing one fails before any UI starts."""
    pat = config.resolve_pat()
    organization_url = config.require_organization_url()
    return AzureDevOpsService(organization_url, pat, timeout=config.request_timeout)


def interactive(console: Console, config_file: Optional[str] = None) -> int:
    """Run the interactive session, then print recovery hints for deleted branches."""
    git_service = GitService.discover()
    config = Config.load(config_file)
    client = _client_from_config(config)

    branches = build_branch_infos(git_service, config.protected_branches)
    if not branches:
        raise AzdoBranchesError("No branches found in repository")

    fetcher = FetchOrchestrator(client, max_workers=config.fetch_workers)
    state = AppState(branches)
    session = BranchSession(state, git_service, fetcher, config.protected_branches)

    from azdo_branches.tui import BranchBrowserApp
    try:
        BranchBrowserApp(session).run()
    finally:
        fetcher.shutdown()

    DisplayService(console).show_deleted_summary(state.deleted_summary_lines())
    return 0


def wi_info(console: Console, config_file: Optional[str] = None) -> int:
    """Print a box describing the current branch's work item."""
    display = DisplayService(console)
    git_service = GitService.discover()
    branch = git_service.current_branch()

    work_item_id = extract_work_item_id(branch)
    if work_item_id is None:
        display.show_branch_only(branch)
        return 0

    client = _client_from_config(Config.load(config_file))
    try:
        work_item = client.get_work_item(work_item_id)
    except WorkItemError as e:
        display.show_error(f"Failed to fetch work item #{work_item_id}: {e.message or e}")
        return 1

    display.show_work_item(work_item, branch)
    return 0


def config_init(console: Console, organization_url: Optional[str] = None,
                config_file: Optional[str] = None) -> int:
    """Write a fresh config file, prompting for the organization URL if needed."""
    path = config_file or config_path()
    console.print("[bold]azdo-branches configuration[/bold]")
    console.print(f"Config file will be saved to: {path}", markup=False)
    console.print()

    if organization_url is None:
        organization_url = Prompt.ask(
            "Azure DevOps Organization URL (e.g., https://dev.azure.com/myorg)",
            console=console,
        )
    organization_url = (organization_url or "").strip()
    if not organization_url:
        raise ConfigError("Organization URL cannot be empty")

    try:
        config = Config(organization_url=organization_url)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    written = config.save(path)
    console.print()
    console.print(f"[green]Configuration saved to {written}[/green]")
    console.print()
    console.print("Don't forget to set your PAT:")
    console.print(f'  export {PAT_ENV_VAR}="your-personal-access-token"', markup=False)
    return 0


def config_show(console: Console, config_file: Optional[str] = None) -> int:
    path = config_file or config_path()
    config = Config.load(path)
    pat_from_env = bool(os.environ.get(PAT_ENV_VAR, "").strip())
    DisplayService(console).show_config(config, str(path), pat_from_env)
    return 0


def config_verify(console: Console, config_file: Optional[str] = None) -> int:
    """Check the organization URL and PAT against the server."""
    config = Config.load(config_file)
    client = _client_from_config(config)

    with console.status(f"Connecting to {config.organization_url}..."):
        project = client.verify()

    console.print(f"[green]✓[/green] Connected to {config.organization_url}")
    if project:
        console.print(f"  First visible project: {project}", markup=False)
    else:
        console.print("  No projects are visible with this PAT", style="yellow")
    return 0
