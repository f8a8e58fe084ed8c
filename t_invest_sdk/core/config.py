"""
SDK configuration: endpoints, TLS, compression and channel tuning.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Upstream environment the channel connects to."""
    PRODUCTION = "production"
    SANDBOX = "sandbox"

    @property
    def api_target(self) -> str:
        return _API_TARGETS[self]


_API_TARGETS = {
    Environment.PRODUCTION: "invest-public-api.tinkoff.ru:443",
    Environment.SANDBOX: "sandbox-invest-public-api.tinkoff.ru:443",
}


class Compression(str, Enum):
    GZIP = "gzip"
    NONE = "none"


class TlsSettings(BaseModel):
    enabled: bool = True
    # PEM bundle with root certificates; grpc's bundled roots when unset
    ca: Optional[str] = None


class SdkSettings(BaseSettings):
    """SDK settings read from ``TINVEST_*`` variables and ``.env``."""

    token: Optional[str] = Field(default=None, description="API token, may also be passed explicitly")
    environment: Environment = Environment.PRODUCTION
    app_name: str = Field(default="t-invest-sdk", description="Sent to the API as x-app-name")

    # host:port override, e.g. a local mock or a proxy
    target: Optional[str] = None
    compression: Compression = Compression.GZIP
    connect_timeout: float = 10.0

    # Maps to grpc options grpc.max_receive_message_length / grpc.keepalive_time_ms
    max_receive_message_length: int = 16 * 1024 * 1024
    keepalive_time_ms: int = 60_000

    tls: TlsSettings = Field(default_factory=TlsSettings)

    DEBUG: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="TINVEST_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    @field_validator("token", "target", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("connect_timeout", "keepalive_time_ms", "max_receive_message_length")
    @classmethod
    def _positive(cls, v, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    def resolve_target(self, environment: Optional[Environment] = None) -> str:
        """Endpoint for the environment unless ``target`` overrides it."""
        if self.target:
            return self.target
        return (environment or self.environment).api_target


settings = SdkSettings()
