"""
Portfolio Analytics - Logging Configuration
Root logger setup shared by the CLI and the API.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


def _file_handler(path: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    logs_dir: Optional[str] = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    console_output: bool = True,
    log_filename_prefix: str = 'analytics'
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Explicit log file path
        logs_dir: Directory for a dated log file, used when log_file is None
        max_bytes: Max size of a log file before rotation
        backup_count: Number of rotated files to keep
        console_output: Also log to stdout
        log_filename_prefix: Prefix of the dated log file name

    Returns:
        Root logger instance
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    handlers = []

    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file is None and logs_dir:
        timestamp = datetime.now().strftime('%Y%m%d')
        log_file = os.path.join(logs_dir, f'{log_filename_prefix}_{timestamp}.log')

    if log_file:
        handlers.append(_file_handler(log_file, max_bytes, backup_count))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    return root_logger

