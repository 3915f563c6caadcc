"""
Chat client configuration.

Settings for the Python chat client: API location and the post-upload
polling policy.

Dependencies: pydantic_settings
System role: Client-side configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """HTTP client and polling settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCCHAT_CLIENT_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default="http://localhost:8082/api/v1", description="API base URL")
    timeout_seconds: float = Field(default=60.0, description="HTTP request timeout")
    page_size: int = Field(default=10, description="Messages fetched per page")

    poll_initial_delay: float = Field(default=0.5, description="First polling delay in seconds")
    poll_multiplier: float = Field(default=2.0, description="Delay growth factor between attempts")
    poll_max_delay: float = Field(default=8.0, description="Upper bound for a single polling delay")
    poll_max_attempts: int = Field(default=10, description="Lookups before polling gives up")
