"""Wildcard matching for branch names.

Only ``*`` is special: it matches any run of characters, including none.
Everything else matches literally and case-sensitively, and a pattern must
cover the whole name.

    main          matches "main" only
    releases/*    matches "releases/v1.0" and "releases/", not "releases"
    feature-*-x   matches "feature-123-x" and "feature--x"
"""

from typing import Iterable, Sequence

DEFAULT_PROTECTED_PATTERNS = ("main", "master")


def matches_pattern(text: str, pattern: str) -> bool:
    """Check if ``text`` matches ``pattern`` as a whole."""
    t = 0
    p = 0
    star_p = -1  # pattern index just past the last '*' seen
    star_t = 0  # text index the last '*' started consuming from

    while t < len(text):
        if p < len(pattern) and pattern[p] == "*":
            # Let the star match nothing for now
            star_p = p + 1
            star_t = t
            p += 1
        elif p < len(pattern) and pattern[p] == text[t]:
            t += 1
            p += 1
        elif star_p != -1:
            # Backtrack: the last star swallows one more character
            star_t += 1
            t = star_t
            p = star_p
        else:
            return False

    while p < len(pattern) and pattern[p] == "*":
        p += 1

    return p == len(pattern)


def is_protected(
    branch_name: str,
    patterns: Iterable[str],
    default: Sequence[str] = DEFAULT_PROTECTED_PATTERNS,
) -> bool:
    """
    Check if a branch name matches any protected pattern.

    Args:
        branch_name: Name of the branch
        patterns: Glob patterns; an empty collection means ``default``
        default: Patterns used when none are configured

    Returns:
        True if any pattern matches
    """
    patterns = list(patterns)
    if not patterns:
        patterns = list(default)
    return any(matches_pattern(branch_name, pattern) for pattern in patterns)
