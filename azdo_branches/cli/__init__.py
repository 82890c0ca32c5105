"""Command-line interface for azdo-branches.

This package provides the CLI entry point, argument parsing and commands.
"""

from .main import main
from .args import parse_args

__all__ = ["main", "parse_args"]
