"""Command-line entry point for azdo-branches"""

import sys
from typing import List, Optional

from rich.console import Console

from azdo_branches.cli import commands
from azdo_branches.cli.args import parse_args
from azdo_branches.exceptions import AzdoBranchesError
from azdo_branches.logging_config import setup_logging

console = Console()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        # The interactive session owns the terminal, so it logs to a file
        setup_logging(
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            tui_mode=parsed_args.command is None,
        )

        if parsed_args.command == "wi":
            return commands.wi_info(console, parsed_args.config)

        if parsed_args.command == "config":
            if parsed_args.config_action == "init":
                return commands.config_init(
                    console, parsed_args.organization_url, parsed_args.config
                )
            if parsed_args.config_action == "show":
                return commands.config_show(console, parsed_args.config)
            return commands.config_verify(console, parsed_args.config)

        return commands.interactive(console, parsed_args.config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except AzdoBranchesError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        return 1
    except Exception as e:
        console.print(f"Error: {e}", style="red", markup=False)
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
