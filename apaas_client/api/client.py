"""
Client facade for the platform OpenAPI: token handling, rate limiting and the service groups.
"""

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from apaas_client.exceptions import ConfigurationError
from apaas_client.models.config import ClientConfig
from apaas_client.services import (
    CreateService,
    DeleteService,
    DepartmentService,
    FunctionService,
    ObjectService,
    SearchService,
    UpdateService,
)
from apaas_client.utils.log_setup import LoggerLevel, set_level, to_logging_level

from .auth import TokenManager
from .rate_limiter import ReservoirRateLimiter
from .transport import Transport

log = logging.getLogger(__name__)


class Client:
    """
    Async client for one namespace of the platform OpenAPI.

    Every call validates the cached token and then runs through a single rate
    limiter shared by all endpoints of this instance.

    Usage:
        async with Client(client_id="...", client_secret="...", namespace="app_x") as client:
            result = await client.search.records_with_iterator(
                "object_store", {"page_size": 100, "use_page_token": True}
            )
    """

    def __init__(self, config: Optional[ClientConfig] = None, **options: Any):
        """
        Initializes the client.

        Args:
            config: A validated configuration. When omitted, ``options`` are
                validated into a ClientConfig.
            **options: ClientConfig fields such as ``client_id``,
                ``client_secret``, ``namespace`` and ``disable_token_cache``.

        Raises:
            ConfigurationError: If the settings fail validation.
        """
        try:
            if config is None:
                config = ClientConfig(**options)
            elif options:
                config = ClientConfig(**{**config.model_dump(), **options})
        except ValidationError as e:
            raise ConfigurationError(f"Client configuration validation failed:\n{e}") from e
        self.config = config

        self._transport = Transport(base_url=config.base_url, timeout=config.timeout)
        self._tokens = TokenManager(
            self._transport,
            client_id=config.client_id,
            client_secret=config.client_secret,
            disable_token_cache=config.disable_token_cache,
            refresh_margin_ms=config.token_refresh_margin_ms,
        )
        self._rate_limiter = ReservoirRateLimiter(
            min_time=config.limiter.min_time,
            reservoir=config.limiter.reservoir,
            refresh_amount=config.limiter.refresh_amount,
            refresh_interval=config.limiter.refresh_interval,
        )

        self.objects = ObjectService(self)
        self.search = SearchService(self)
        self.create = CreateService(self)
        self.update = UpdateService(self)
        self.delete = DeleteService(self)
        self.departments = DepartmentService(self)
        self.functions = FunctionService(self)

        log.info("Client initialized successfully")

    async def __aenter__(self) -> "Client":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def init(self) -> None:
        """Fetches the first access token."""
        await self._tokens.ensure_valid()
        log.info("Client initialized and ready")

    async def close(self) -> None:
        """Closes the underlying HTTP session."""
        await self._transport.close()

    @property
    def namespace(self) -> str:
        return self.config.namespace

    @property
    def token(self) -> Optional[str]:
        """The cached access token, if any."""
        return self._tokens.token

    @property
    def token_expire_time(self) -> Optional[int]:
        """Seconds until the cached token expires; None without a token."""
        return self._tokens.remaining_validity()

    @property
    def token_manager(self) -> TokenManager:
        return self._tokens

    @property
    def rate_limiter(self) -> ReservoirRateLimiter:
        return self._rate_limiter

    def set_logger_level(self, level: Union[LoggerLevel, int, str]) -> None:
        """Sets the verbosity of the package loggers (fatal ... trace)."""
        set_level(level)
        log.info(f"Log level set to {logging.getLevelName(to_logging_level(level))}")

    def object_path(self, object_name: str) -> str:
        return f"/v1/data/namespaces/{self.namespace}/objects/{object_name}"

    def records_path(self, object_name: str, record_id: Optional[str] = None) -> str:
        path = f"{self.object_path(object_name)}/records"
        return f"{path}/{record_id}" if record_id is not None else path

    async def execute(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Runs one authenticated request through the shared rate limiter.

        The token is checked when the request is dispatched, so time spent
        queued in the limiter counts against the refresh margin.
        """

        async def operation() -> dict[str, Any]:
            token = await self._tokens.ensure_valid()
            return await self._transport.request(method, path, payload=payload, token=token)

        return await self._rate_limiter.schedule(operation)
