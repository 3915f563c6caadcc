"""
Subscription plan limits.

Page and file-size limits per plan tier, applied during ingestion.

Dependencies: pydantic_settings
System role: Upload quota configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlanSettings(BaseSettings):
    """Per-plan upload limits."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLANS_",
        case_sensitive=False,
        extra="ignore",
    )

    free_pages_per_pdf: int = Field(default=5, description="Maximum pages per PDF on the free plan")
    pro_pages_per_pdf: int = Field(default=25, description="Maximum pages per PDF on the pro plan")
    free_max_file_size_mb: int = Field(default=4, description="Maximum PDF size on the free plan")
    pro_max_file_size_mb: int = Field(default=16, description="Maximum PDF size on the pro plan")
