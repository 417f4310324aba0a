"""
Application configuration models and helpers.

Centralizes settings so the CLI, the OAuth helpers and the upload services share a
consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


YOUTUBE_UPLOAD_SCOPE = "https://www.googleapis.com/auth/youtube.upload"
YOUTUBE_FORCE_SSL_SCOPE = "https://www.googleapis.com/auth/youtube.force-ssl"


class GoogleSettings(BaseSettings):
    """OAuth client registration used against Google's endpoints."""

    model_config = SettingsConfigDict(extra="ignore")

    client_id: str = Field(..., validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="GOOGLE_CLIENT_SECRET")


class OAuthSettings(BaseSettings):
    """Consent flow configuration, including the local callback listener."""

    model_config = SettingsConfigDict(extra="ignore")

    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        (YOUTUBE_UPLOAD_SCOPE, YOUTUBE_FORCE_SSL_SCOPE),
        validation_alias="OAUTH_SCOPES",
    )
    callback_host: str = Field("localhost", validation_alias="OAUTH_CALLBACK_HOST")
    callback_port: int = Field(3000, validation_alias="OAUTH_CALLBACK_PORT")
    callback_path: str = Field("/oauth2callback", validation_alias="OAUTH_CALLBACK_PATH")

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope.strip() for scope in value.split(",") if scope.strip())

    @property
    def redirect_uri(self) -> str:
        return f"http://{self.callback_host}:{self.callback_port}{self.callback_path}"


class SecretStoreSettings(BaseSettings):
    """Where and how the refresh token is kept between runs."""

    model_config = SettingsConfigDict(extra="ignore")

    db_path: str = Field(
        "~/.youtube-remote-upload/secrets.db",
        validation_alias="SECRET_STORE_PATH",
    )
    encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for stored values. "
            "Falls back to the Google client secret when omitted."
        ),
    )
    service_name: str = Field("YouTubeRemoteUpload", validation_alias="SECRET_STORE_SERVICE")
    account_name: str = Field("refreshToken", validation_alias="SECRET_STORE_ACCOUNT")


class UploadSettings(BaseSettings):
    """Upload and processing-poll tuning."""

    model_config = SettingsConfigDict(extra="ignore")

    defaults_path: str = Field("uploadDefaults.json", validation_alias="UPLOAD_DEFAULTS_PATH")
    chunk_size_bytes: int = Field(8 * 1024 * 1024, validation_alias="UPLOAD_CHUNK_SIZE")
    notify_subscribers: bool = Field(False, validation_alias="UPLOAD_NOTIFY_SUBSCRIBERS")
    processing_poll_ms: int = Field(3000, validation_alias="PROCESSING_POLL_MS")
    thumbnail_poll_ms: int = Field(5000, validation_alias="THUMBNAIL_POLL_MS")
    spinner_tick_ms: int = Field(150, validation_alias="SPINNER_TICK_MS")
    watch_url_base: str = Field(
        "https://www.youtube.com/watch?v=",
        validation_alias="WATCH_URL_BASE",
    )

    def watch_url(self, video_id: str) -> str:
        return f"{self.watch_url_base}{video_id}"


class AppSettings(BaseSettings):
    """Root settings object for the uploader."""

    model_config = SettingsConfigDict(extra="ignore")

    log_level: str = Field("WARNING", validation_alias="APP_LOG_LEVEL")
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    secret_store: SecretStoreSettings = Field(default_factory=SecretStoreSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GoogleSettings",
    "OAuthSettings",
    "SecretStoreSettings",
    "UploadSettings",
    "YOUTUBE_FORCE_SSL_SCOPE",
    "YOUTUBE_UPLOAD_SCOPE",
    "get_settings",
]
