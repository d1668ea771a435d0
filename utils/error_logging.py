"""
Error logging configuration for separate schema and access error logs.

This module sets up dedicated loggers for the two families of configurator
errors: broken schemas or library configuration, and everything a caller can
trigger at runtime. File output is opt-in through setup_error_loggers().
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Tuple, Union


SCHEMA_LOGGER_NAME = 'errors.schema'
ACCESS_LOGGER_NAME = 'errors.access'


def _has_file_handler(logger: logging.Logger, path: Path) -> bool:
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == path.resolve():
            return True
    return False


def setup_error_loggers(log_dir: Optional[Union[str, Path]] = None) -> Tuple[logging.Logger, logging.Logger]:
    """
    Set up separate loggers for schema errors and access errors.

    Calling this again with the same directory does not add duplicate handlers.

    Args:
        log_dir: Directory for rotating log files; when None, the loggers
            only propagate to the root logger

    Returns:
        tuple: (schema_logger, access_logger)
    """
    schema_logger = logging.getLogger(SCHEMA_LOGGER_NAME)
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)

    if log_dir is None:
        return schema_logger, access_logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S UTC'
    )

    for logger, filename in ((schema_logger, 'schema_errors.log'), (access_logger, 'access_errors.log')):
        logger.setLevel(logging.ERROR)
        target = log_path / filename
        if _has_file_handler(logger, target):
            continue
        handler = RotatingFileHandler(
            target,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        handler.setFormatter(detailed_formatter)
        logger.addHandler(handler)

    return schema_logger, access_logger


# Create singleton instances
schema_error_logger, access_error_logger = setup_error_loggers()
