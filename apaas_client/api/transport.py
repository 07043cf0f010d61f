"""
HTTP transport for the platform OpenAPI: sends JSON requests and classifies response envelopes.
"""

import asyncio
import json
import logging
import time
from typing import Any, Optional

import aiohttp

from apaas_client.exceptions import ApplicationError, TransportError
from apaas_client.models.config import DEFAULT_BASE_URL
from apaas_client.utils.log_setup import TRACE

log = logging.getLogger(__name__)

SUCCESS_CODE = "0"


class Transport:
    """
    Thin aiohttp wrapper shared by the token manager and every service.

    The platform reports application failures inside the JSON body, so a
    response is only successful when its envelope ``code`` is ``"0"``, even
    on HTTP 200.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 60.0):
        """
        Args:
            base_url: Scheme and host of the OpenAPI gateway.
            timeout: Total request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=15),
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Sends one request and returns the successful response envelope.

        Args:
            method: HTTP verb.
            path: Path below ``base_url``, starting with ``/``.
            payload: JSON body, also sent for DELETE when given.
            token: Raw access token for the ``Authorization`` header.

        Raises:
            TransportError: On network failures, timeouts, non-2xx responses
                without an envelope, or unparseable bodies.
            ApplicationError: When the envelope ``code`` is not ``"0"``.
        """
        session = await self._initialize_session()
        headers = {"Authorization": token} if token else None

        start_time = time.monotonic()
        try:
            async with session.request(
                method, self.base_url + path, json=payload, headers=headers
            ) as r:
                status = r.status
                # Gateway error pages are not always UTF-8.
                body = (await r.read()).decode("utf-8", errors="replace")
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {path} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        duration_ms = (time.monotonic() - start_time) * 1000
        envelope = self._parse_envelope(body)

        if not 200 <= status < 300:
            if envelope is not None and str(envelope.get("code")) != SUCCESS_CODE:
                raise ApplicationError(
                    str(envelope.get("code")), str(envelope.get("msg", "")), status=status
                )
            raise TransportError(
                f"{method} {path} returned HTTP {status}: {body[:200]}", status=status
            )

        if envelope is None:
            raise TransportError(
                f"{method} {path} returned a body that is not a JSON envelope",
                status=status,
            )

        code = str(envelope.get("code"))
        log.debug(f"{method} {path} -> code={code} ({duration_ms:.0f}ms)")
        log.log(TRACE, f"{method} {path} response: {body}")

        if code != SUCCESS_CODE:
            raise ApplicationError(code, str(envelope.get("msg", "")), status=status)

        return envelope

    @staticmethod
    def _parse_envelope(body: str) -> Optional[dict[str, Any]]:
        try:
            data = json.loads(body)
        except ValueError:
            return None
        if isinstance(data, dict) and "code" in data:
            return data
        return None
