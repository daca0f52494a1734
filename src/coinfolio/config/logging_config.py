"""Logging configuration."""

import logging
import sys
from typing import Optional

from coinfolio.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

# Libraries that log every request or statement at INFO/DEBUG
_CHATTY_LOGGERS = ("sqlalchemy.engine", "urllib3.connectionpool")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Send application logs to stdout.

    `level` overrides the configured `log_level`. An unknown name falls back
    to INFO instead of failing startup.
    """
    name = (level or get_settings().log_level).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("coinfolio").setLevel(resolved)
    for chatty in _CHATTY_LOGGERS:
        logging.getLogger(chatty).setLevel(logging.WARNING)
