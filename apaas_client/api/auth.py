"""
Handles the app token lifecycle: credential exchange, caching and proactive refresh.
"""

import logging
import time
from typing import Optional

from apaas_client.exceptions import ApplicationError, AuthenticationError
from apaas_client.models.results import SessionToken

from .transport import Transport

log = logging.getLogger(__name__)

TOKEN_PATH = "/auth/v1/appToken"


class TokenManager:
    """
    Owns the client's access token.

    The token is refreshed before use whenever it is missing, expires within
    the safety margin, or caching is disabled. Concurrent callers that both
    see a stale token may both exchange; the last response wins.
    """

    def __init__(
        self,
        transport: Transport,
        client_id: str,
        client_secret: str,
        disable_token_cache: bool = False,
        refresh_margin_ms: int = 60_000,
    ):
        """
        Initializes the token manager.

        Args:
            transport: Transport used for the credential exchange.
            client_id: Application client ID.
            client_secret: Application client secret.
            disable_token_cache: Exchange credentials before every request.
            refresh_margin_ms: Refresh when the token expires within this window.
        """
        self._transport = transport
        self._client_id = client_id
        self._client_secret = client_secret
        self.disable_token_cache = disable_token_cache
        self.refresh_margin_ms = refresh_margin_ms
        self._session_token: Optional[SessionToken] = None

    @staticmethod
    def _now_ms() -> float:
        return time.time() * 1000

    @property
    def token(self) -> Optional[str]:
        """The cached access token, if any."""
        return self._session_token.access_token if self._session_token else None

    @property
    def expire_time(self) -> Optional[int]:
        """Absolute expiry of the cached token in epoch milliseconds."""
        return self._session_token.expire_time if self._session_token else None

    def remaining_validity(self) -> Optional[int]:
        """
        Returns the whole seconds left before the cached token expires.

        Returns:
            None when no token is cached, 0 once it has lapsed.
        """
        if self._session_token is None:
            log.warning("[yellow]No valid token available[/yellow]")
            return None

        remaining_ms = self._session_token.expire_time - self._now_ms()
        if remaining_ms <= 0:
            log.warning("[yellow]Token has expired[/yellow]")
            return 0

        remaining_s = int(remaining_ms // 1000)
        log.debug(f"Token expires in {remaining_s} seconds")
        return remaining_s

    async def ensure_valid(self) -> str:
        """
        Makes sure a usable token is cached, exchanging credentials if needed.

        Returns:
            The access token to send with the next request.
        """
        if self.disable_token_cache:
            log.debug("Token cache disabled, refreshing token")
            await self.exchange()
        elif self._session_token is None:
            log.debug("No token cached, fetching new token")
            await self.exchange()
        elif self._session_token.expires_within(self._now_ms(), self.refresh_margin_ms):
            log.debug("Token expired or about to expire, refreshing")
            await self.exchange()

        return self._session_token.access_token

    async def exchange(self) -> None:
        """
        Exchanges the client credentials for a new access token.

        The cached token is only replaced after a successful response.

        Raises:
            AuthenticationError: If the platform rejects the credentials.
            TransportError: If the token endpoint cannot be reached.
        """
        try:
            envelope = await self._transport.request(
                "POST",
                TOKEN_PATH,
                payload={
                    "clientId": self._client_id,
                    "clientSecret": self._client_secret,
                },
            )
        except ApplicationError as e:
            log.error(f"[red]Failed to fetch access token: {e.msg}[/red]")
            raise AuthenticationError(f"Failed to fetch access token: {e.msg}") from e

        data = envelope.get("data") or {}
        access_token = data.get("accessToken")
        expire_time = data.get("expireTime")
        if not access_token or expire_time is None:
            raise AuthenticationError(
                "Failed to fetch access token: response carried no token."
            )

        self._session_token = SessionToken(
            access_token=str(access_token), expire_time=int(expire_time)
        )
        log.info("Access token refreshed successfully")
