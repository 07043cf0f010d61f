"""
Defines custom exceptions for the client so callers can tell authentication,
transport and application-level failures apart.
"""

from typing import Any, Optional


class ApaasClientError(Exception):
    """Base exception for all client-specific errors."""


class ConfigurationError(ApaasClientError):
    """Raised for issues related to configuration loading or validation."""


class AuthenticationError(ApaasClientError):
    """Raised when the token endpoint rejects the client credentials."""


class TransportError(ApaasClientError):
    """
    Raised for network-level failures: timeouts, connection errors and
    non-2xx responses whose body is not a platform envelope.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ApplicationError(ApaasClientError):
    """Raised when a response envelope carries a non-zero ``code``."""

    def __init__(self, code: str, msg: str, status: Optional[int] = None):
        super().__init__(f"{msg} (code={code})")
        self.code = code
        self.msg = msg
        self.status = status


class BatchPartialFailureError(ApaasClientError):
    """
    Raised when a chunk after the first one fails.

    The chunks before ``failed_chunk`` were applied remotely and are not rolled
    back; their results are kept in ``completed_results``.
    """

    def __init__(self, failed_chunk: int, total_chunks: int, completed_results: list[Any]):
        super().__init__(
            f"Chunk {failed_chunk}/{total_chunks} failed; "
            f"{len(completed_results)} earlier chunk(s) were already applied."
        )
        self.failed_chunk = failed_chunk
        self.total_chunks = total_chunks
        self.completed_results = completed_results


class PaginationLimitError(ApaasClientError):
    """Raised when a paginated query exceeds the caller's page cap."""
