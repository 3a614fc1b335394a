"""Set up the qname logger with optional rich formatting."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from qname.config.models import LoggingSettings

LOGGER_NAME = "qname"


def setup_logger(settings: LoggingSettings | None = None) -> logging.Logger:
    """Configure the package logger from logging settings.

    Args:
        settings: Logging section of the configuration; defaults apply when omitted.

    Returns:
        logging.Logger: The configured ``qname`` logger.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.level)
    # Clear existing handlers to prevent duplication
    logger.handlers.clear()
    if settings.rich:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True), markup=False, show_path=False
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "setup_logger"]
