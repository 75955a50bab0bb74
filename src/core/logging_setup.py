"""Logging configuration for whoever hosts the game (the core itself only ever calls logging.getLogger)."""

import logging
import sys
from typing import Optional

from src.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the root logger. Level defaults to the configured one."""
    log_level = (level or get_settings().log_level).upper()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # SQLAlchemy is very chatty on INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
