"""Tests for application configuration."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from wortschatz.config import Settings, settings
from wortschatz.logging_config import setup_logging


class TestSettingsProperties:
    """Tests for Settings computed properties."""

    def test_resolved_log_file_path_default(self):
        settings = Settings(data_dir=Path("/tmp/test"))
        assert settings.resolved_log_file_path == Path("/tmp/test/wortschatz.log")

    def test_resolved_log_file_path_custom(self):
        settings = Settings(
            data_dir=Path("/tmp/test"),
            log_file_path=Path("/custom/path.log"),
        )
        assert settings.resolved_log_file_path == Path("/custom/path.log")

    def test_db_path(self):
        settings = Settings(data_dir=Path("/tmp/test"))
        assert settings.db_path == Path("/tmp/test/wortschatz.db")

    def test_resolved_database_url_default(self):
        """Should fall back to a SQLite file inside data_dir."""
        settings = Settings(data_dir=Path("/tmp/test"), database_url="")
        assert settings.resolved_database_url == "sqlite+aiosqlite:////tmp/test/wortschatz.db"

    def test_resolved_database_url_custom(self):
        settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
        assert settings.resolved_database_url == "sqlite+aiosqlite:///:memory:"

    def test_oracle_configured(self):
        assert Settings(openai_api_key="sk-test").oracle_configured is True
        assert Settings(openai_api_key="").oracle_configured is False


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_default_values(self, monkeypatch):
        """Should have sensible defaults when no env vars set."""
        for name in (
            "LOG_FILE_ENABLED",
            "LOG_LEVEL",
            "COMPLETION_MODEL",
            "REVIEW_MODEL",
            "ALTERNATIVES_MODEL",
            "ADMIN_PASSWORD",
            "AUTH_COOKIE_NAME",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_file_enabled is False
        assert settings.completion_model == "gpt-4o-mini"
        assert settings.review_model == "gpt-4o"
        assert settings.alternatives_model == "gpt-4o"
        assert settings.admin_password == ""
        assert settings.auth_cookie_name == "wortschatz_auth"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REVIEW_MODEL", "gpt-4.1")
        monkeypatch.setenv("ORACLE_TIMEOUT", "5")

        settings = Settings(_env_file=None)

        assert settings.review_model == "gpt-4.1"
        assert settings.oracle_timeout == 5.0


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_handlers(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_handler(self, monkeypatch):
        monkeypatch.setattr(settings, "log_level", "INFO")
        monkeypatch.setattr(settings, "log_file_enabled", False)
        setup_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert logging.getLogger("openai").level == logging.WARNING

    def test_cli_without_file_logs_nowhere(self, monkeypatch):
        monkeypatch.setattr(settings, "log_file_enabled", False)
        setup_logging(console=False)
        handlers = logging.getLogger().handlers
        assert [type(h) for h in handlers] == [logging.NullHandler]

    def test_file_handler(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "log_file_enabled", True)
        monkeypatch.setattr(settings, "log_file_path", tmp_path / "logs" / "w.log")
        setup_logging(console=False)
        handlers = logging.getLogger().handlers
        try:
            assert len(handlers) == 1
            assert isinstance(handlers[0], RotatingFileHandler)
            assert (tmp_path / "logs").is_dir()
        finally:
            for handler in handlers:
                handler.close()
