"""
Data Models Layer.

This package contains the configuration models and the result containers
used throughout the client.
"""

from .config import ClientConfig, LimiterConfig
from .results import AggregatedResult, SessionToken, extract_items

__all__ = [
    "AggregatedResult",
    "ClientConfig",
    "LimiterConfig",
    "SessionToken",
    "extract_items",
]
