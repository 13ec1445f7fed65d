"""
Shared configuration management for the WebApp auth service.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="WEBAPP_AUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Launch payload verification
    bot_token: str = Field(default="")
    accept_signature_alias: bool = Field(default=False)
    # Logs expected/received hashes on mismatch. Never enable in production.
    signature_diagnostics: bool = Field(default=False)

    # Session tokens
    jwt_secret: str = Field(default="")
    session_ttl_seconds: int = Field(default=86400)

    # HTTP
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origin_list(self) -> List[str]:
        """CORS origins parsed from the comma-separated setting."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.env.strip().lower() in ("prod", "production")

    def require_secrets(self) -> None:
        """Fail fast on configuration the service cannot serve traffic with."""
        if not self.jwt_secret.strip():
            raise ConfigurationError("WEBAPP_AUTH_JWT_SECRET is required")

        if not self.bot_token.strip():
            raise ConfigurationError("WEBAPP_AUTH_BOT_TOKEN is required")

        if self.session_ttl_seconds <= 0:
            raise ConfigurationError(
                "WEBAPP_AUTH_SESSION_TTL_SECONDS must be positive",
                details={"session_ttl_seconds": self.session_ttl_seconds}
            )

        if self.signature_diagnostics and self.is_production:
            raise ConfigurationError(
                "WEBAPP_AUTH_SIGNATURE_DIAGNOSTICS must not be enabled in production"
            )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = 8010
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
