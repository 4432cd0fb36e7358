"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string (postgresql+asyncpg://...)",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Session tokens
    jwt_secret_key: str = Field(min_length=32, description="Secret key for signing JWTs (minimum 32 characters)")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    session_token_expire_hours: int = Field(
        default=10,
        description="Session token lifetime in hours",
        gt=0,
    )

    # Service discovery (Consul)
    discovery_enabled: bool = Field(
        default=True,
        description="Register with Consul on startup and deregister on shutdown",
    )
    consul_host: str = Field(
        default="127.0.0.1",
        description="Consul agent host",
    )
    consul_port: int = Field(
        default=8500,
        description="Consul agent HTTP port",
        gt=0,
    )
    consul_scheme: str = Field(
        default="http",
        pattern="^(http|https)$",
        description="Scheme used to reach the Consul agent",
    )
    consul_timeout: float = Field(
        default=5.0,
        description="Consul request timeout in seconds",
        gt=0,
    )

    # Self-registration
    service_id: str = Field(
        default="user-service",
        description="Unique ID this process registers under in Consul",
    )
    service_name: str = Field(
        default="User_Service",
        description="Logical service name this process registers under in Consul",
    )
    service_address: str = Field(
        default="127.0.0.1",
        description="Address advertised to Consul for this process",
    )
    service_port: int = Field(
        default=8000,
        description="Port advertised to Consul for this process",
        gt=0,
    )

    # Peer service used to enrich non-admin login responses
    peer_service_name: str = Field(
        default="Express_Poc",
        description="Consul service name of the peer that supplies mod_poc_id",
    )
    peer_request_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for the mod_poc_id lookup",
        gt=0,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_prefix: str = Field(
        default="/user",
        description="Prefix under which the user routes are mounted",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def consul_base_url(self) -> str:
        """Base URL of the Consul agent HTTP API."""
        return f"{self.consul_scheme}://{self.consul_host}:{self.consul_port}"


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
