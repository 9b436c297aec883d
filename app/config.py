"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify bearer tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="America/Sao_Paulo",
        description="IANA timezone (or UTC offset) used for timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    notification_parallel_reads: bool = Field(
        default=True,
        description=(
            "Issue the independent read queries of a dispatch concurrently, each "
            "on its own session. Disable for in-memory SQLite databases."
        ),
    )
    notification_list_default_limit: int = Field(default=120, gt=0)
    notification_list_max_limit: int = Field(default=300, gt=0)
    notification_preview_length: int = Field(default=180, gt=3)
    top_privilege_role: str = Field(
        default="adm_mestre",
        description="Role alias whose members are always informed of system events",
    )
    rule_admin_roles: list[str] = Field(
        default_factory=lambda: ["adm_mestre", "adm_dorata"],
        description="Role aliases allowed to manage sector default rules",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    works_sector: str = Field(default="obras")
    default_indication_sector: str = Field(default="vendas")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
