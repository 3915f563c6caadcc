"""
Database connection settings.

PostgreSQL (asyncpg) in deployed environments; a full URL override
allows a local sqlite+aiosqlite file for development.

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Database connection configuration for the ORM layer
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class DatabaseSettings(BaseSettings):
    """Connection and pool settings read from POSTGRES_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = "postgres"
    db: str = "docchat"
    require_ssl: bool = Field(default=False, description="Pass ssl=require to asyncpg")

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = False

    url_override: str | None = Field(
        default=None,
        description="Full async URL, e.g. sqlite+aiosqlite:///./docchat.db",
    )

    @property
    def async_database_url(self) -> str:
        if self.url_override:
            return self.url_override
        url = URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query={"ssl": "require"} if self.require_ssl else {},
        )
        return url.render_as_string(hide_password=False)

    @property
    def uses_connection_pool(self) -> bool:
        """False for SQLite, whose drivers reject pool sizing arguments."""
        return make_url(self.async_database_url).get_backend_name() != "sqlite"
