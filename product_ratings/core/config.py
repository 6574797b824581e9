from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration for product-ratings-api.

    The database can be given either as a full DATABASE_URL or as separate
    DB_* pieces. The APP_DB_* names used by older deployments are accepted
    as aliases for user, password and database name.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Service ---
    app_name: str = Field(default="product-ratings-api", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    environment: str = Field(
        default="local",
        validation_alias=AliasChoices("ENVIRONMENT", "APP_ENV", "ENV"),
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CORS allowlist (CSV)
    cors_allowed_origins: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ALLOWED_ORIGINS",
    )

    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # -------------------------
    # Database
    # -------------------------
    # Option A: full URL (used verbatim when set).
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Option B: pieces
    db_dialect: str = Field(default="postgresql+psycopg", validation_alias="DB_DIALECT")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(
        default="product_ratings",
        validation_alias=AliasChoices("DB_NAME", "APP_DB_NAME"),
    )
    db_user: str = Field(
        default="postgres",
        validation_alias=AliasChoices("DB_USER", "APP_DB_USERNAME"),
    )
    db_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DB_PASSWORD", "APP_DB_PASSWORD"),
    )

    # Create missing tables on startup (no migrations).
    db_create_tables: bool = Field(default=True, validation_alias="DB_CREATE_TABLES")

    @property
    def database_url_resolved(self) -> str:
        """
        Return DATABASE_URL when defined; otherwise build it from DB_*.

        A missing DB_PASSWORD still yields a URL; the connection fails later
        if the server requires one.
        """
        if self.database_url and self.database_url.strip():
            return self.database_url.strip()

        pwd = self.db_password or ""
        return f"{self.db_dialect}://{self.db_user}:{pwd}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
