"""Console logging for the postmigrate package."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    logger = logging.getLogger("postmigrate")
    logger.setLevel(_level_from_string(level))
    logger.handlers = []

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(_level_from_string(level))
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
