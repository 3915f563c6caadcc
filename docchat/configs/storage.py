"""
Document storage and fetch configuration.

Settings for downloading uploaded PDFs: primary HTTP fetch parameters and
the documents bucket used as the fallback retrieval path.

Dependencies: pydantic_settings
System role: Raw document retrieval configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Settings for raw document retrieval."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    documents_bucket: str = Field(
        default="docchat-uploads",
        description="S3 bucket holding uploaded documents under their storage key",
    )
    region: str = Field(
        default="us-west-2",
        description="AWS region for the documents bucket",
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for the primary HTTP fetch",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; PDF-Processor/1.0)",
        description="User-Agent header sent when fetching uploads",
    )
    accept: str = Field(
        default="application/pdf,*/*",
        description="Accept header sent when fetching uploads",
    )
