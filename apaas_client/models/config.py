"""
Pydantic models for client configuration.
Provides validation for credentials, namespace and rate limiter settings.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://ae-openapi.feishu.cn"


class LimiterConfig(BaseModel):
    """Reservoir rate limiter settings. Durations are in seconds."""

    model_config = ConfigDict(validate_assignment=True)

    min_time: float = 0.2
    reservoir: int = 20
    # Follows reservoir when unset.
    refresh_amount: Optional[int] = None
    refresh_interval: float = 1.0

    @field_validator("min_time")
    @classmethod
    def validate_min_time(cls, v: float) -> float:
        if v < 0:
            raise ValueError("min_time cannot be negative.")
        return v

    @field_validator("reservoir", "refresh_amount")
    @classmethod
    def validate_permits(cls, v: Optional[int]) -> Optional[int]:
        """Ensures the limiter can ever dispatch a request."""
        if v is not None and v < 1:
            raise ValueError("Reservoir sizes must be at least 1.")
        return v

    @field_validator("refresh_interval")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("refresh_interval must be positive.")
        return v


class ClientConfig(BaseModel):
    """A validated configuration model for the client."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Authentication
    client_id: str
    client_secret: str = Field(..., repr=False)
    namespace: str
    disable_token_cache: bool = False
    token_refresh_margin_ms: int = 60_000

    # Transport
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0

    limiter: LimiterConfig = Field(default_factory=LimiterConfig)

    @field_validator("client_id", "client_secret", "namespace")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty.")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Strips the trailing slash so paths can be appended directly."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {v}")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive.")
        return v

    @field_validator("token_refresh_margin_ms")
    @classmethod
    def validate_margin(cls, v: int) -> int:
        if v < 0:
            raise ValueError("token_refresh_margin_ms cannot be negative.")
        return v
