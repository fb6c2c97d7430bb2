"""
Logging configuration for the record store.

This module provides a standardized logging setup that works well with
AWS Lambda and CloudWatch Logs.
"""
import logging
import os
import sys


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured logger for a record store module.

    Args:
        name: Logger name (defaults to this module's name)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    # Modules call this at import time; configure each logger only once
    if logger.handlers:
        return logger

    # LOG_LEVEL is validated by Config.from_env; fall back to INFO here
    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # stdout is what Lambda ships to CloudWatch
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)

    # One line per record: time, module, level, message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Handler is attached here; the root logger would print a second copy
    logger.propagate = False

    return logger
