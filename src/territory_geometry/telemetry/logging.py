"""Console logging for CLI runs."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "territory_geometry"


def configure_logging(level: str | int = "INFO", *, debug: bool = False) -> logging.Logger:
    """Attach a rich handler to the package logger; safe to call more than once.

    ``debug`` overrides ``level`` and surfaces the per-step geometry events.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else _level(level))

    if not any(getattr(handler, "_territory_geometry", False) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._territory_geometry = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def _level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved
