"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from tts_relay import main as main_module
from tts_relay.app import _read_logging_levels, create_app
from tts_relay.config import Settings, get_settings


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.tts_host == "https://translate.google.com"
    assert settings.tts_lang == "en"
    assert settings.tts_slow is False
    assert settings.tts_timeout_ms == 10000
    assert settings.tts_split_punct == ""
    assert settings.tts_max_length == 200
    assert settings.tts_max_concurrency == 1
    assert settings.relay_bind_host == "0.0.0.0"
    assert settings.relay_port == 8000


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TTS_HOST", "https://translate.google.de")
    monkeypatch.setenv("TTS_LANG", "de")
    monkeypatch.setenv("TTS_SLOW", "true")
    monkeypatch.setenv("TTS_TIMEOUT_MS", "5000")
    monkeypatch.setenv("TTS_SPLIT_PUNCT", "、。")
    monkeypatch.setenv("TTS_MAX_CONCURRENCY", "4")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["http://localhost:5173"]')

    settings = Settings()

    assert settings.long_synthesis_defaults() == {
        "lang": "de",
        "slow": True,
        "host": "https://translate.google.de",
        "timeout": 5000,
        "split_punct": "、。",
        "max_length": 200,
        "max_concurrency": 4,
    }
    assert settings.cors_allow_origins == ["http://localhost:5173"]


@pytest.mark.parametrize(
    "name, value",
    [
        ("TTS_MAX_LENGTH", "500"),
        ("TTS_MAX_LENGTH", "0"),
        ("TTS_TIMEOUT_MS", "0"),
        ("TTS_LANG", ""),
        ("RELAY_PORT", "0"),
        ("RELAY_PORT", "http"),
    ],
)
def test_settings_reject_invalid_environment(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached(isolated_settings) -> None:
    assert get_settings() is get_settings()


def test_create_app_applies_logging_settings(
    isolated_settings, monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    (tmp_path / "logging_settings.conf").write_text("terminal = warning\nfile = debug\n")
    log_file = tmp_path / "logs" / "relay.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    create_app()

    handlers = logging.getLogger().handlers
    file_handlers = [h for h in handlers if isinstance(h, logging.FileHandler)]
    stream_handlers = [h for h in handlers if type(h) is logging.StreamHandler]
    assert [h.level for h in file_handlers] == [logging.DEBUG]
    assert [h.level for h in stream_handlers] == [logging.WARNING]
    assert log_file.parent.exists()

    for handler in file_handlers:
        handler.close()


def test_read_logging_levels(tmp_path: Path) -> None:
    config_file = tmp_path / "logging_settings.conf"
    config_file.write_text(
        """
# Relay logging
terminal = debug
FILE = Error
upstream = off
"""
    )

    assert _read_logging_levels(config_file) == {
        "terminal": logging.DEBUG,
        "file": logging.ERROR,
        "upstream": None,
    }


def test_read_logging_levels_defaults(tmp_path: Path) -> None:
    """Missing file, unknown keys and unknown levels keep the defaults."""
    assert _read_logging_levels(tmp_path / "nonexistent.conf") == {
        "terminal": logging.INFO,
        "file": logging.INFO,
        "upstream": logging.WARNING,
    }

    config_file = tmp_path / "logging_settings.conf"
    config_file.write_text("terminal = verbose\nsessions = debug\nnot a setting\n")

    assert _read_logging_levels(config_file)["terminal"] == logging.INFO
    assert "sessions" not in _read_logging_levels(config_file)


def test_create_app_sets_upstream_logger_levels(
    isolated_settings, tmp_path: Path
) -> None:
    conf = tmp_path / "logging_settings.conf"

    conf.write_text("upstream = debug\n")
    create_app()
    assert logging.getLogger("httpx").level == logging.DEBUG
    assert logging.getLogger("httpcore").level == logging.DEBUG

    conf.write_text("upstream = off\n")
    create_app()
    assert logging.getLogger("httpx").level > logging.CRITICAL


def test_main_binds_configured_address(
    isolated_settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("RELAY_BIND_HOST", "127.0.0.1")
    monkeypatch.setenv("RELAY_PORT", "9100")
    calls: list[dict[str, Any]] = []

    def fake_run(app: str, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(main_module.uvicorn, "run", fake_run)

    main_module.main()

    assert calls == [
        {
            "app": "tts_relay.app:create_app",
            "factory": True,
            "host": "127.0.0.1",
            "port": 9100,
            "reload": False,
        }
    ]
