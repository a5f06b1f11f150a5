"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas.tts import DEFAULT_HOST, DEFAULT_LANG, DEFAULT_TIMEOUT_MS
from .services.tts.text_segmenter import DEFAULT_MAX_LENGTH
from .services.tts.translate_client import REMOTE_TEXT_LIMIT

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Defaults applied to synthesis calls that leave an option unset
    tts_host: str = Field(
        default=DEFAULT_HOST,
        min_length=1,
        validation_alias=AliasChoices("TTS_HOST", "tts_host"),
    )
    tts_lang: str = Field(
        default=DEFAULT_LANG,
        min_length=1,
        validation_alias=AliasChoices("TTS_LANG", "tts_lang"),
    )
    tts_slow: bool = Field(
        default=False,
        validation_alias=AliasChoices("TTS_SLOW", "tts_slow"),
    )
    tts_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=1,
        validation_alias=AliasChoices("TTS_TIMEOUT_MS", "tts_timeout_ms"),
    )
    tts_split_punct: str = Field(
        default="",
        validation_alias=AliasChoices("TTS_SPLIT_PUNCT", "tts_split_punct"),
    )
    tts_max_length: int = Field(
        default=DEFAULT_MAX_LENGTH,
        ge=1,
        le=REMOTE_TEXT_LIMIT,
        validation_alias=AliasChoices("TTS_MAX_LENGTH", "tts_max_length"),
    )
    tts_max_concurrency: int = Field(
        default=1,
        ge=1,
        le=16,
        validation_alias=AliasChoices("TTS_MAX_CONCURRENCY", "tts_max_concurrency"),
    )

    # Address the uvicorn entrypoint binds to
    relay_bind_host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("RELAY_BIND_HOST", "relay_bind_host"),
    )
    relay_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("RELAY_PORT", "relay_port"),
    )

    logging_settings_path: Path = Field(
        default_factory=lambda: PROJECT_ROOT / "logging_settings.conf",
        validation_alias=AliasChoices(
            "LOGGING_SETTINGS_PATH", "logging_settings_path"
        ),
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
    )

    def synthesis_defaults(self) -> dict[str, object]:
        """Return the defaults for a single synthesis request."""

        return {
            "lang": self.tts_lang,
            "slow": self.tts_slow,
            "host": self.tts_host,
            "timeout": self.tts_timeout_ms,
        }

    def long_synthesis_defaults(self) -> dict[str, object]:
        """Return the defaults for a long-text synthesis request."""

        return {
            **self.synthesis_defaults(),
            "split_punct": self.tts_split_punct,
            "max_length": self.tts_max_length,
            "max_concurrency": self.tts_max_concurrency,
        }


@lru_cache
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["PROJECT_ROOT", "Settings", "get_settings"]
