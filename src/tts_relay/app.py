"""Application factory for the FastAPI service."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .routers.tts import router as tts_router
from .services.tts.translate_client import REMOTE_TEXT_LIMIT
from .services.tts_service import TTSService

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# "off" silences the target entirely
_LEVEL_NAMES: dict[str, int | None] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": None,
}
_LEVEL_DEFAULTS: dict[str, str] = {
    "terminal": "info",
    "file": "info",
    "upstream": "warning",
}
_UPSTREAM_LOGGERS = ("httpx", "httpcore")


def _read_logging_levels(path: Path) -> dict[str, int | None]:
    """Read ``key = level`` lines from the logging settings file.

    ``terminal`` and ``file`` set the console and log file handler levels.
    ``upstream`` sets the level of the HTTP client loggers that trace each
    call to the translate endpoint. A missing file, unknown keys and unknown
    levels leave the defaults in place.
    """
    levels = {key: _LEVEL_NAMES[name] for key, name in _LEVEL_DEFAULTS.items()}
    if not path.exists():
        return levels

    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip().lower()
        if not sep or key not in levels or value not in _LEVEL_NAMES:
            continue
        levels[key] = _LEVEL_NAMES[value]
    return levels


def _configure_logging(settings: Settings) -> None:
    """Configure logging from LOG_LEVEL / LOG_FILE and the logging settings file."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    levels = _read_logging_levels(settings.logging_settings_path)

    handlers: list[logging.Handler] = []
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    log_file = os.getenv("LOG_FILE")
    if log_file and levels["file"] is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(levels["file"])
        handlers.append(file_handler)

    if levels["terminal"] is not None:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(levels["terminal"])
        handlers.append(console_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logging.getLogger("tts_relay").setLevel(log_level)
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)

    upstream_level = levels["upstream"]
    for name in _UPSTREAM_LOGGERS:
        upstream_logger = logging.getLogger(name)
        upstream_logger.setLevel(
            logging.CRITICAL + 1 if upstream_level is None else upstream_level
        )


def create_app(tts_service: TTSService | None = None) -> FastAPI:
    settings = get_settings()

    # Configure logging first thing
    _configure_logging(settings)

    service = tts_service or TTSService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            try:
                await service.aclose()
            except Exception as exc:
                logging.warning("Error closing TTS HTTP client: %s", exc)

    app = FastAPI(
        title="TTS Relay",
        version="0.1.0",
        description="Long-text speech synthesis over the Google Translate TTS endpoint.",
        lifespan=lifespan,
    )

    app.state.tts_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tts_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str | int]:
        return {
            "status": "ok",
            "host": service.settings.tts_host,
            "default_lang": service.settings.tts_lang,
            "max_length": service.settings.tts_max_length,
            "remote_limit": REMOTE_TEXT_LIMIT,
        }

    return app


__all__ = ["create_app"]
