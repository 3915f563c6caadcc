"""
Chat and retrieval configuration.

Dependencies: pydantic_settings
System role: Responder tuning
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatSettings(BaseSettings):
    """Retrieval and answer formatting settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAT_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=2, ge=1, le=10, description="Passages retrieved per question")
    snippet_length: int = Field(default=200, description="Characters quoted per passage")
    messages_page_size: int = Field(default=10, description="Default message page size")
