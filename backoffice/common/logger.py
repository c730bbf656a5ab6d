"""Logging setup for the back office service and the seeding CLI.

Configures the ``backoffice`` package logger once; every module logs through
``logging.getLogger(__name__)`` and inherits its handlers.
"""

import logging
import logging.handlers
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logger(name: str, log_dir: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """Attach a console handler, and a rotating ``<name>.log`` under ``log_dir`` when given.

    Calling it again only updates the level.

    Raises:
        ValueError: If ``level`` is not a standard level name
    """
    level_name = level.upper()
    if level_name not in _LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(_LEVELS)}")

    logger = logging.getLogger(name)
    logger.setLevel(level_name)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        ))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
