"""
Logging configuration for the EstateIQ application.

This module provides centralized logging configuration that can be imported
by all other modules. It sets up console logging plus rotating application
and error log files under ``settings.LOG_DIR``.
"""

import logging
import logging.handlers
import os

from estateiq.config import settings


def setup_logging(level: str = "INFO", log_dir: str = settings.LOG_DIR):
    """
    Configure application-wide logging.

    Sets up:
    - Console handler for development feedback
    - Rotating file handler for general logs
    - Separate error log file

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory that receives estateiq.log and errors.log
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    os.makedirs(log_dir, exist_ok=True)
    app_log_file = os.path.join(log_dir, 'estateiq.log')
    error_log_file = os.path.join(log_dir, 'errors.log')

    detailed_formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    # 10MB max, keep 5 backups
    file_handler = logging.handlers.RotatingFileHandler(
        app_log_file,
        maxBytes=10*1024*1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    error_handler = logging.handlers.RotatingFileHandler(
        error_log_file,
        maxBytes=5*1024*1024,
        backupCount=3,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    # Reduce noise from some libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    root_logger.info(f"Logging configured at level: {level}")
    root_logger.info(f"Log files: {app_log_file}, {error_log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Usually __name__ of the calling module

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


# Initialize logging when this module is imported
setup_logging(settings.LOG_LEVEL)
