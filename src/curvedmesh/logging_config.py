"""
Logging Configuration
=====================
Library modules only create child loggers with ``logging.getLogger(__name__)``;
nothing is emitted until an application calls :func:`setup_logging`.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "curvedmesh"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    quiet_numba: bool = True
) -> logging.Logger:
    """
    Attach console and file handlers to the 'curvedmesh' logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        quiet_numba: Keep numba's compiler messages at WARNING and above.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # numba reports every compiler pass at DEBUG
    if quiet_numba:
        logging.getLogger("numba").setLevel(max(level, logging.WARNING))

    logger.info("Logging initialized.")
    return logger
