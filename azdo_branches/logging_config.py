"""Logging configuration for azdo-branches"""
import logging
from pathlib import Path
from typing import Optional

import platformdirs
from rich.console import Console
from rich.logging import RichHandler

from azdo_branches.constants import APP_NAME

LOG_FILE_NAME = 'session.log'
FILE_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'


def log_file_path() -> Path:
    """Where the interactive session writes its log (platform log directory)."""
    return platformdirs.user_log_path(APP_NAME) / LOG_FILE_NAME


def setup_logging(verbose: bool = False, debug: bool = False, tui_mode: bool = False,
                  log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the application.

    One-shot commands log to stderr through Rich. The interactive session owns
    the terminal, so in TUI mode records only go to a file, overwritten each run.
    With ``debug`` the file is written in both modes.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages
        tui_mode: If True, log to file only
        log_file: Override for the log file location
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if tui_mode or debug else level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Connection pool chatter would bury the fetch worker messages
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    if tui_mode or debug:
        path = log_file or log_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%H:%M:%S'))
        root_logger.addHandler(file_handler)

    if not tui_mode:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=debug,
            show_path=debug,
            rich_tracebacks=debug,
            markup=False,
        )
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('[%(name)s] %(message)s'))
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the package prefix (``services.fetch_service`` -> ``fetch_service``)."""
    for prefix in ('azdo_branches.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
