import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
TESTS_DIR = PROJECT_ROOT / "tests"
for path in (SRC_DIR, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


@pytest.fixture
def isolated_settings(monkeypatch, tmp_path):
    """Point settings at a temporary logging config and clear the cache."""
    from tts_relay.config import get_settings

    monkeypatch.setenv(
        "LOGGING_SETTINGS_PATH", str(tmp_path / "logging_settings.conf")
    )
    monkeypatch.delenv("LOG_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
