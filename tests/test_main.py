"""
Tests for the command line runner.
"""

import asyncio
import logging

import pytest

from poll_watcher.core.exceptions import ScanError
from poll_watcher.main import (
    build_watch_configuration,
    build_watcher,
    load_settings,
    log_report,
    main,
    run,
)
from poll_watcher.models import WatcherState
from poll_watcher.services.scanner.scan_functions import (
    scan_files_in_directory,
    scan_files_in_subdirectories,
)
from poll_watcher.services.watcher.change_report import ChangeReport
from poll_watcher.services.watcher.report_channel import ReportChannel
from poll_watcher.services.watcher.watcher import Watcher


class TestLoadSettings:
    def test_command_line_overrides(self, tmp_path):
        settings = load_settings(
            [
                "--root", str(tmp_path),
                "--suffix", ".cfg",
                "--suffix", ".txt",
                "--mode", "subdirectories",
                "--interval", "2",
            ]
        )

        assert settings.root_directory == str(tmp_path)
        assert settings.match_suffixes == [".cfg", ".txt"]
        assert settings.scan_mode == "subdirectories"
        assert settings.refresh_interval_seconds == 2.0

    def test_missing_root_returns_error_code(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("ROOT_DIRECTORY", raising=False)

        assert main([]) == 2


class TestBuildWatcher:
    def test_maps_settings_to_configuration(self, tmp_path):
        settings = load_settings(["--root", str(tmp_path), "--suffix", ".cfg"])

        watcher = build_watcher(settings)

        assert watcher.state is WatcherState.STOPPED
        assert watcher.config.root_directory == str(tmp_path)
        assert watcher.config.match_suffixes == (".cfg",)
        assert watcher.config.scan_function is scan_files_in_directory
        assert watcher.config.effective_refresh_interval == 10.0

    def test_subdirectory_mode(self, tmp_path):
        settings = load_settings(["--root", str(tmp_path), "--mode", "subdirectories"])

        watcher = build_watcher(settings)

        assert watcher.config.scan_function is scan_files_in_subdirectories


class TestLogReport:
    def test_logs_updates_and_deletes(self, caplog, info_factory):
        caplog.set_level(logging.INFO)
        report = ChangeReport(
            updated=(info_factory("/w/new.txt", 1.0),),
            deleted=(info_factory("/w/old.txt", 1.0),),
        )

        log_report(report)

        assert "UPDATED: /w/new.txt" in caplog.text
        assert "DELETED: /w/old.txt" in caplog.text

    def test_logs_root_read_error(self, caplog):
        log_report(ChangeReport.from_error(ScanError("gone", root_read_failed=True)))

        assert "Cannot read watched directory: gone" in caplog.text


@pytest.mark.asyncio
async def test_run_consumes_reports_until_destroyed(caplog, manual_clock, tmp_path):
    caplog.set_level(logging.INFO)
    (tmp_path / "file.txt").write_text("hello")
    settings = load_settings(["--root", str(tmp_path)])
    watcher = Watcher(
        build_watch_configuration(settings, ReportChannel()), clock=manual_clock
    )

    runner = asyncio.create_task(run(watcher))
    await manual_clock.tick()

    async def _wait_for_log() -> None:
        while "UPDATED:" not in caplog.text:
            await asyncio.sleep(0)

    await asyncio.wait_for(_wait_for_log(), 2)
    await watcher.destroy()
    await asyncio.wait_for(runner, 2)

    assert watcher.state is WatcherState.DESTROYED
    assert str(tmp_path / "file.txt") in caplog.text
