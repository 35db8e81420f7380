"""
Portfolio Analytics - Utilities Package
"""

from utils.logging_config import setup_logging
from utils.worker_pool import WorkerPool

__all__ = [
    'setup_logging',
    'WorkerPool',
]
