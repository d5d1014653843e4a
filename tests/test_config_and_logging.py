"""
Tests for Settings, host-specific settings files and logging setup.
"""

import logging
import logging.handlers

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from poll_watcher.config import Settings
from poll_watcher.logging_config import setup_logging
from poll_watcher.utils.host_config import (
    get_hostname,
    get_hostname_settings_file,
    list_all_settings_files,
)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


class TestSettings:
    def test_defaults(self, tmp_path):
        settings = Settings(root_directory=str(tmp_path))

        assert settings.match_suffixes == [".txt"]
        assert settings.scan_mode == "directory"
        assert settings.refresh_interval_seconds == 10.0
        assert settings.channel_capacity == 1
        assert settings.emit_empty_reports is False
        assert settings.log_directory.name == "logs"

    def test_root_directory_is_required(self, monkeypatch):
        monkeypatch.delenv("ROOT_DIRECTORY", raising=False)
        with pytest.raises(ValidationError):
            Settings()

    def test_unknown_scan_mode_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            Settings(root_directory=str(tmp_path), scan_mode="recursive")

    def test_values_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROOT_DIRECTORY", str(tmp_path))
        monkeypatch.setenv("MATCH_SUFFIXES", '[".cfg", ".txt"]')
        monkeypatch.setenv("SCAN_MODE", "subdirectories")
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "2.5")

        settings = Settings()

        assert settings.root_directory == str(tmp_path)
        assert settings.match_suffixes == [".cfg", ".txt"]
        assert settings.scan_mode == "subdirectories"
        assert settings.refresh_interval_seconds == 2.5


class TestHostConfig:
    def test_falls_back_to_base_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        assert get_hostname_settings_file() == "watcher.env"
        assert list_all_settings_files() == []

    def test_prefers_host_specific_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "watcher.env").write_text("ROOT_DIRECTORY=/shared\n")
        host_file = tmp_path / f"{get_hostname()}-watcher.env"
        host_file.write_text("ROOT_DIRECTORY=/local\n")

        assert get_hostname_settings_file() == host_file.name
        assert list_all_settings_files() == ["watcher.env", host_file.name]


class TestSetupLogging:
    def test_installs_console_and_file_handlers(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "watcher.log"
        settings = Settings(
            root_directory=str(tmp_path),
            log_file_path=str(log_file),
            log_level="DEBUG",
        )

        setup_logging(settings)
        setup_logging(settings)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 2
        assert any(isinstance(h, RichHandler) for h in handlers)
        file_handlers = [
            h for h in handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == settings.log_retention_days

        logging.info("watcher log line")
        file_handlers[0].flush()

        assert log_file.exists()
        assert "watcher log line" in log_file.read_text(encoding="utf-8")
