"""
Tests for environment-driven settings.
"""

import os
from pathlib import Path

import pytest

from kandidatsok.config import DEFAULT_INDEX, DEFAULT_LOG_LEVEL, DEFAULT_TIMEOUT, Settings, load_env
from kandidatsok.logger import StructuredLogger

ENV_VARS = [
    "OPEN_SEARCH_URI",
    "OPEN_SEARCH_USERNAME",
    "OPEN_SEARCH_PASSWORD",
    "KANDIDATSOK_INDEX",
    "KANDIDATSOK_TIMEOUT",
    "KANDIDATSOK_AUDIT_DB",
    "KANDIDATSOK_LOG_LEVEL",
    "KANDIDATSOK_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # setenv first so teardown restores the original state, including absence
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestSettingsFromEnv:
    """Test reading settings from the environment."""

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("OPEN_SEARCH_URI", "https://opensearch.local/")
        settings = Settings.from_env()

        assert settings.open_search_uri == "https://opensearch.local"
        assert settings.index == DEFAULT_INDEX
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.audit_db_path is None
        assert settings.open_search_username is None
        assert settings.log_level == "INFO"

    def test_all_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPEN_SEARCH_URI", "https://opensearch.local")
        monkeypatch.setenv("OPEN_SEARCH_USERNAME", "user")
        monkeypatch.setenv("OPEN_SEARCH_PASSWORD", "secret")
        monkeypatch.setenv("KANDIDATSOK_INDEX", "veilederkandidat_os5")
        monkeypatch.setenv("KANDIDATSOK_TIMEOUT", "2.5")
        monkeypatch.setenv("KANDIDATSOK_AUDIT_DB", str(tmp_path / "audit.db"))
        monkeypatch.setenv("KANDIDATSOK_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.open_search_username == "user"
        assert settings.open_search_password == "secret"
        assert settings.index == "veilederkandidat_os5"
        assert settings.timeout == 2.5
        assert settings.audit_db_path == tmp_path / "audit.db"
        assert settings.log_level == "DEBUG"

    def test_missing_uri(self):
        with pytest.raises(ValueError, match="OPEN_SEARCH_URI"):
            Settings.from_env()

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_invalid_timeout_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("OPEN_SEARCH_URI", "https://opensearch.local")
        monkeypatch.setenv("KANDIDATSOK_TIMEOUT", raw)
        assert Settings.from_env().timeout == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("raw", ["verbose", "trace", "42"])
    def test_unknown_log_level_falls_back(self, monkeypatch, raw):
        """An unusable level still gives settings a logger can be built from."""
        monkeypatch.setenv("OPEN_SEARCH_URI", "https://opensearch.local")
        monkeypatch.setenv("KANDIDATSOK_LOG_LEVEL", raw)

        settings = Settings.from_env()

        assert settings.log_level == DEFAULT_LOG_LEVEL
        StructuredLogger(name="test", level=settings.log_level, enable_console=False)


class TestLoadEnv:
    """Test .env loading."""

    def test_loads_dotenv(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Path(".env").write_text("OPEN_SEARCH_URI=http://from-dotenv:9200\n", encoding="utf-8")

        load_env()

        assert os.environ["OPEN_SEARCH_URI"] == "http://from-dotenv:9200"

    def test_existing_variables_win(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPEN_SEARCH_URI", "http://from-env:9200")
        Path(".env").write_text("OPEN_SEARCH_URI=http://from-dotenv:9200\n", encoding="utf-8")

        load_env()

        assert os.environ["OPEN_SEARCH_URI"] == "http://from-env:9200"

    def test_missing_file_is_fine(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        load_env()
        assert "OPEN_SEARCH_URI" not in os.environ
