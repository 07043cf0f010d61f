"""
Async client for the aPaaS platform OpenAPI.

Provides authenticated, rate-limited access to records, object metadata,
department ID exchange and cloud functions of one namespace.
"""

import logging

from .api.client import Client
from .exceptions import (
    ApaasClientError,
    ApplicationError,
    AuthenticationError,
    BatchPartialFailureError,
    ConfigurationError,
    PaginationLimitError,
    TransportError,
)
from .models import AggregatedResult, ClientConfig, LimiterConfig
from .utils.log_setup import LoggerLevel, setup_logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AggregatedResult",
    "ApaasClientError",
    "ApplicationError",
    "AuthenticationError",
    "BatchPartialFailureError",
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "LimiterConfig",
    "LoggerLevel",
    "PaginationLimitError",
    "TransportError",
    "setup_logging",
]
