"""
Console logging setup for scripts and demos.

Library modules only create loggers with ``logging.getLogger(__name__)``;
nothing is configured until an application calls ``setup_logging``.
"""

from typing import Optional
import logging

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``pid_trainer`` logger.

    Args:
        level: Logging level
        log_file: Also write to this file when given

    Returns:
        The configured package logger
    """
    formatter = logging.Formatter(LOG_FORMAT)

    logger = logging.getLogger('pid_trainer')
    logger.setLevel(level)

    if not any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

        if log_file is not None:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
