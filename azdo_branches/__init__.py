"""
azdo-branches - browse git branches alongside their Azure DevOps work items
"""

from .__version__ import __version__
from .cli.main import main

__all__ = ["main", "__version__"]
