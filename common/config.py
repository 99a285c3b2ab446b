"""
Configuration for the expense tracker.

Uses pydantic-settings to read the process environment and a local ``.env``
file. ``DB_URL`` is the only required value; the CLI refuses to start
without it.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ValidationError
from .storage import DEFAULT_TABLE
from .validators import validate_table_name


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_url: str = Field(
        ...,
        description="SQLAlchemy connection URL of the expense database",
    )
    db_table: str = Field(
        default=DEFAULT_TABLE,
        description="Name of the table holding expenses",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @field_validator("db_url")
    @classmethod
    def normalize_db_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("DB_URL cannot be empty")
        # SQLAlchemy only knows the postgresql:// spelling.
        if v.startswith("postgres://"):
            v = "postgresql://" + v[len("postgres://"):]
        return v

    @field_validator("db_table")
    @classmethod
    def check_db_table(cls, v: str) -> str:
        try:
            return validate_table_name(v)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
