"""Utility functions for azdo-branches.

- pattern: wildcard matching for protected branch names
"""

from .pattern import DEFAULT_PROTECTED_PATTERNS, matches_pattern, is_protected

__all__ = [
    "DEFAULT_PROTECTED_PATTERNS",
    "matches_pattern",
    "is_protected",
]
