"""Typed configuration for the academy API.

Everything comes from environment variables (or a local .env file). Firebase
credentials are not listed here: the Admin SDK reads
GOOGLE_APPLICATION_CREDENTIALS, and FIREBASE_AUTH_EMULATOR_HOST when testing
against the emulator, directly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environments where the session cookie may travel over plain HTTP.
_INSECURE_ENVS = frozenset({"dev", "development", "local", "test"})


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env_name: str = Field(default="development", alias="ENV_NAME")

    database_url: str = Field(alias="DATABASE_URL")

    # SQLAdmin console login; the secret also signs its session cookie.
    session_secret_key: str = Field(alias="SESSION_SECRET_KEY")
    admin_username: str = Field(alias="ADMIN_USERNAME")
    admin_password: str = Field(alias="ADMIN_PASSWORD")

    # Comma separated; "*" disables credentialed CORS.
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Only needed when the credentials do not carry a project id (emulator).
    firebase_project_id: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")

    # Firebase accepts session cookies living between 1 day and 2 weeks.
    session_expires_days: int = Field(
        default=5, alias="SESSION_EXPIRES_DAYS", ge=1, le=14
    )

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        return self.env_name.lower() not in _INSECURE_ENVS

    @computed_field
    @property
    def session_expires_in(self) -> timedelta:
        return timedelta(days=self.session_expires_days)


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
