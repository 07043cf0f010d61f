"""
Platform API Layer.

This package handles all communication with the platform OpenAPI.
"""

from .auth import TokenManager
from .client import Client
from .rate_limiter import ReservoirRateLimiter
from .transport import Transport

__all__ = ["Client", "ReservoirRateLimiter", "TokenManager", "Transport"]
