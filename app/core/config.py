"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the CLI scripts and the
photo analysis pipeline share a consistent configuration surface.
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

_SETTINGS_CONFIG = SettingsConfigDict(populate_by_name=True, extra="ignore")


class GeminiSettings(BaseSettings):
    """Configuration for Gemini model access."""

    model_config = _SETTINGS_CONFIG

    api_key: Optional[str] = Field(
        None,
        validation_alias="GEMINI_API_KEY",
        description="Missing keys surface as an internal error on analysis requests.",
    )
    vision_model_name: str = Field(
        "gemini-1.5-flash", validation_alias="GEMINI_VISION_MODEL_NAME"
    )


class OracleSettings(BaseSettings):
    """Timeout and retry policy applied to every oracle call."""

    model_config = _SETTINGS_CONFIG

    timeout_seconds: float = Field(45.0, validation_alias="ORACLE_TIMEOUT_SECONDS")
    max_attempts: int = Field(3, ge=1, validation_alias="ORACLE_MAX_ATTEMPTS")
    backoff_seconds: float = Field(
        2.0,
        ge=0,
        validation_alias="ORACLE_BACKOFF_SECONDS",
        description="Base delay multiplied by the attempt number between retries.",
    )


class BatchSettings(BaseSettings):
    """Batch sizing and burst smoothing for a single analysis request."""

    model_config = _SETTINGS_CONFIG

    max_batch_size: int = Field(12, ge=1, validation_alias="MAX_BATCH_SIZE")
    concurrency_limit: int = Field(6, ge=1, validation_alias="CONCURRENCY_LIMIT")
    result_cap: int = Field(12, ge=1, validation_alias="RESULT_CAP")
    stagger_seconds: float = Field(
        0.2,
        ge=0,
        validation_alias="STAGGER_SECONDS",
        description="Delay multiplied by a photo's index within its group.",
    )
    group_pause_seconds: float = Field(
        1.0, ge=0, validation_alias="GROUP_PAUSE_SECONDS"
    )


class ImageSettings(BaseSettings):
    """Bounds enforced when preparing images for analysis."""

    model_config = _SETTINGS_CONFIG

    min_dimension: int = Field(500, validation_alias="IMAGE_MIN_DIMENSION")
    max_dimension: int = Field(2048, validation_alias="IMAGE_MAX_DIMENSION")
    resize_target: int = Field(1536, validation_alias="IMAGE_RESIZE_TARGET")
    max_bytes: int = Field(10 * 1024 * 1024, validation_alias="IMAGE_MAX_BYTES")
    initial_quality: int = Field(92, validation_alias="IMAGE_INITIAL_QUALITY")
    quality_step: int = Field(5, ge=1, validation_alias="IMAGE_QUALITY_STEP")
    min_quality: int = Field(60, validation_alias="IMAGE_MIN_QUALITY")


class SafetySettings(BaseSettings):
    """Content safety screening configuration."""

    model_config = _SETTINGS_CONFIG

    enabled: bool = Field(True, validation_alias="SAFETY_CHECK_ENABLED")
    monitored_categories: Annotated[tuple[str, ...], NoDecode] = Field(
        ("adult", "violence", "racy"),
        validation_alias="SAFETY_MONITORED_CATEGORIES",
    )

    @field_validator("monitored_categories", mode="before")
    @classmethod
    def _split_categories(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing categories as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(
            category.strip().lower()
            for category in value.split(",")
            if category.strip()
        )


class FetchSettings(BaseSettings):
    """Limits for downloading photos supplied by reference."""

    model_config = _SETTINGS_CONFIG

    timeout_seconds: float = Field(15.0, validation_alias="PHOTO_FETCH_TIMEOUT_SECONDS")
    max_bytes: int = Field(25 * 1024 * 1024, validation_alias="PHOTO_FETCH_MAX_BYTES")


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    version: str = Field("3.2.0", validation_alias="APP_VERSION")
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    oracle: OracleSettings = Field(default_factory=OracleSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    safety: SafetySettings = Field(default_factory=SafetySettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "BatchSettings",
    "FetchSettings",
    "GeminiSettings",
    "ImageSettings",
    "OracleSettings",
    "SafetySettings",
    "get_settings",
]
