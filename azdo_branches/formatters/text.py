"""Plain text wrapping."""

from typing import List

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text


def wrap_text(text: str, max_width: int) -> List[str]:
    """
    Greedy word wrap on whitespace.

    Words longer than ``max_width`` are kept whole on their own line.
    A width of 0 disables wrapping. Always returns at least one line.
    """
    if max_width <= 0:
        return [text]

    lines: List[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif cell_len(current) + 1 + cell_len(word) <= max_width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines or [""]


def append_wrapped_text(lines: List[Text], text: str, max_width: int, style: Style) -> None:
    """Wrap ``text`` and append each piece as a two-space indented line."""
    for piece in wrap_text(text, max_width):
        lines.append(Text.assemble("  ", (piece, style)))
