"""Logging — one "newsfeed" logger tree, console + daily file.

Components log through children ("newsfeed.engine", "newsfeed.sources.mma")
so the file shows which adapter or pool thread produced each line.
"""

import logging
import sys
from datetime import datetime

from .config import LOG_LEVEL, LOGS_DIR

ROOT = "newsfeed"

_configured = False


class _ConsoleHandler(logging.StreamHandler):
    """stderr handler; stdout stays free for `newsfeed fetch` JSON."""

    def __init__(self):
        super().__init__(sys.stderr)


def _console_level() -> int:
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


def _configure(root: logging.Logger):
    root.setLevel(logging.DEBUG)
    root.propagate = False

    console = _ConsoleHandler()
    console.setLevel(_console_level())
    console.setFormatter(logging.Formatter("  %(message)s"))
    root.addHandler(console)

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            LOGS_DIR / f"newsfeed_{datetime.now():%Y%m%d}.log", encoding="utf-8"
        )
    except OSError as e:
        root.warning("File logging disabled: %s", e)
        return

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(file_handler)


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the newsfeed logger, or its child for one component."""
    global _configured
    root = logging.getLogger(ROOT)
    if not _configured:
        if not root.handlers:
            _configure(root)
        _configured = True
    return root.getChild(component) if component else root


def set_verbose(verbose: bool = True):
    """Switch console output to DEBUG (or back to the configured level)."""
    for handler in get_logger().handlers:
        if isinstance(handler, _ConsoleHandler):
            handler.setLevel(logging.DEBUG if verbose else _console_level())


def log(msg: str, component: str | None = None):
    get_logger(component).info(msg)
