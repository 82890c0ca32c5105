"""Shared constants for azdo-branches."""

from rich.style import Style

APP_NAME = "azdo-branches"

# Environment variable checked before the config file for the PAT
PAT_ENV_VAR = "AZDO_BRANCHES_PAT"

AZURE_DEVOPS_API_VERSION = "7.0"
DEFAULT_REQUEST_TIMEOUT = 30  # seconds
DEFAULT_FETCH_WORKERS = 4


# Session timing
POLL_INTERVAL = 0.05  # seconds between loop ticks
STATUS_DURATION_SECS = 3.0

# Details pane scrolling
LINE_SCROLL_AMOUNT = 1
PAGE_SCROLL_DIVISOR = 2  # page scroll moves visible_height / divisor lines


# Layout
DETAILS_HORIZONTAL_PADDING = 4  # border plus two columns of indent


# Symbol constants
SYMBOL_CURRENT_BRANCH = "* "
SYMBOL_NOT_CURRENT = "  "
SYMBOL_PROTECTED = " 🔒"
SYMBOL_SELECTED = "► "
SYMBOL_SEPARATOR = "  •  "
SYMBOL_INFO_SEPARATOR = "  │  "


class Theme:
    """Rich styles used across the terminal UI."""

    ACCENT = Style(color="cyan")
    MUTED = Style(color="bright_black")
    TEXT = Style(color="white")
    ERROR = Style(color="red", bold=True)
    SUCCESS = Style(color="green")
    WARNING = Style(color="yellow")
    TITLE = Style(color="cyan", bold=True)
    CURRENT_BRANCH = Style(color="green", bold=True)
    TAGS = Style(color="magenta")


# Remote status colors (Rich color names)
REMOTE_STATUS_COLORS = {
    "local-only": "bright_black",
    "up-to-date": "green",
    "ahead": "yellow",
    "behind": "yellow",
    "diverged": "yellow",
    "gone": "red",
}
