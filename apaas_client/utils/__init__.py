"""
Utilities: batch chunking, cursor pagination and logging setup.
"""

from .chunking import MAX_BATCH_SIZE, chunked, run_chunked
from .log_setup import LoggerLevel, setup_logging
from .pagination import paginate

__all__ = [
    "MAX_BATCH_SIZE",
    "LoggerLevel",
    "chunked",
    "paginate",
    "run_chunked",
    "setup_logging",
]
