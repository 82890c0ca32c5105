"""Command-line argument parsing for azdo-branches."""

import argparse
from typing import List, Optional

from azdo_branches.__version__ import __version__
from azdo_branches.constants import PAT_ENV_VAR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azdo-branches",
        description="Browse local git branches alongside their Azure DevOps work items",
        epilog=f"Setup: run 'azdo-branches config init', then set the {PAT_ENV_VAR} environment "
        "variable to a personal access token with Work Items (Read) scope.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"azdo-branches {__version__}")
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file to use instead of the default location",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.add_parser(
        "wi", help="Show the work item linked to the current branch"
    )

    config_parser = subparsers.add_parser("config", help="Configure azdo-branches")
    config_actions = config_parser.add_subparsers(dest="config_action", metavar="ACTION")
    config_actions.required = True

    init_parser = config_actions.add_parser(
        "init", help="Write a config file with default values (overwrites existing)"
    )
    init_parser.add_argument(
        "--organization-url",
        metavar="URL",
        help="Organization URL, e.g. https://dev.azure.com/myorg (prompted for when omitted)",
    )
    config_actions.add_parser("show", help="Show current configuration")
    config_actions.add_parser("verify", help="Verify organization URL and PAT access")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
