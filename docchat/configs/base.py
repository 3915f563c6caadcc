"""
Shared settings inherited by the aggregate Settings class.

Holds the process-wide knobs (logging level, CORS origins, bind address)
and the common .env loading behaviour.

Dependencies: pydantic_settings
System role: Root of the configuration hierarchy
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Process-wide settings read from the unprefixed environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="Deployment name")
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Browser origins allowed to call the API",
    )
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8082)
