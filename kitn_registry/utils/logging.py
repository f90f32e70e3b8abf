"""Logging setup using Python's standard logging with a Rich handler.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once with the level chosen on the command line.
"""

import logging

LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def setup_logging(level: str = "warning") -> None:
    """Configure the root logger with a Rich handler at ``level``."""
    from rich.logging import RichHandler

    log_level = LEVELS.get(level.lower(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(log_level)

    if not root.handlers:
        handler = RichHandler(
            rich_tracebacks=(log_level == logging.DEBUG),
            show_path=False,
            markup=False,
            show_time=False,
        )
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(log_level)
