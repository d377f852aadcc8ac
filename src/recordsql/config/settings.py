"""
Configuration management for recordsql.

Settings are loaded from environment variables (prefix ``RECORDSQL_``) and an
optional ``.env`` file using Pydantic BaseSettings. Everything here is optional:
the library works with defaults, and the dialect is normally inferred from the
connection handed to the executor.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recordsql.sql.dialects import available_dialects, normalize_dialect_name

SETTINGS_ENV_FILE = Path(os.getenv("RECORDSQL_ENV_FILE", ".env")).expanduser()
SUPPORTED_DIALECTS = tuple(available_dialects())
SUPPORTED_PARAMSTYLES = ("qmark", "format", "numeric", "named")


class Settings(BaseSettings):
    """
    Library settings with environment variable support.

    Environment variables use the RECORDSQL_ prefix. For example,
    RECORDSQL_DIALECT=postgresql forces the PostgreSQL dialect for every
    executor that is not given one explicitly.
    """

    dialect: Optional[str] = Field(
        default=None,
        description="Dialect override; inferred from the connection when unset",
    )
    paramstyle: Optional[Literal["qmark", "format", "numeric", "named"]] = Field(
        default=None,
        description="Placeholder style override; inferred from the driver when unset",
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Database URL, used only by callers that build their own engine",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=False, description="Enable file logging")
    log_file_dir: str = Field(default="logs", description="Directory for log files")
    log_params: bool = Field(
        default=False,
        description="Include bound parameter values in statement debug logs",
    )

    @field_validator("dialect")
    @classmethod
    def _normalize_dialect(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        name = normalize_dialect_name(value)
        if not name:
            return None
        if name not in available_dialects():
            raise ValueError(
                f"Unsupported dialect '{value}'. Available: {available_dialects()}"
            )
        return name

    @field_validator("paramstyle", mode="before")
    @classmethod
    def _normalize_paramstyle(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()

    model_config = SettingsConfigDict(
        env_prefix="RECORDSQL_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. Tests that change environment
    variables should call ``get_settings.cache_clear()`` afterwards.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
