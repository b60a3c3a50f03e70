"""Configuration management for the FPL query server."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="development or production")

    # FPL API
    fpl_api_base: str = Field(
        default="https://fantasy.premierleague.com/api",
        description="Base URL of the FPL API",
    )
    fpl_user_agent: str = Field(default="fpl-query/1.0", description="User agent for FPL API")
    http_timeout: float = Field(default=20.0, description="Upstream request timeout in seconds")

    # Server
    transport: Literal["stdio", "sse"] = Field(
        default="stdio",
        validation_alias="mcp_transport",
        description="MCP transport",
    )
    host: str = Field(default="0.0.0.0", description="Bind address for the SSE transport")
    port: int = Field(default=8000, description="Port for the SSE transport")
    shutdown_grace_seconds: float = Field(default=0.1, description="Delay before forced exit")

    @computed_field
    @property
    def is_production(self) -> bool:
        """Internal error details are withheld from responses in production."""
        return self.environment.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
