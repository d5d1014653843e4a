"""
Run a watcher from settings and log every change report until interrupted.

    python -m poll_watcher.main --root "My Files" --suffix .txt --suffix .cfg
"""

import argparse
import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import Settings
from .logging_config import setup_logging
from .services.scanner import WatchConfiguration, get_scan_function
from .services.watcher import ChangeReport, ReportChannel, Watcher, create_watcher


def build_watch_configuration(settings: Settings, channel: ReportChannel) -> WatchConfiguration:
    return WatchConfiguration(
        root_directory=settings.root_directory,
        match_suffixes=settings.match_suffixes,
        refresh_interval_seconds=settings.refresh_interval_seconds,
        channel=channel,
        scan_function=get_scan_function(settings.scan_mode),
    )


def build_watcher(settings: Settings) -> Watcher:
    channel = ReportChannel(settings.channel_capacity)
    return create_watcher(
        build_watch_configuration(settings, channel),
        emit_empty_reports=settings.emit_empty_reports,
    )


def log_report(report: ChangeReport) -> None:
    if report.is_root_read_error():
        logging.error(f"Cannot read watched directory: {report.error_details()}")
        return
    if report.is_error():
        logging.error(f"Scan failed: {report.error_details()}")
        return

    for path in report.updated_paths():
        logging.info(f"UPDATED: {path}")
    for path in report.deleted_paths():
        logging.info(f"DELETED: {path}")


async def run(watcher: Watcher) -> None:
    """Start the watcher and consume its channel until it is closed."""
    await watcher.start()
    try:
        async for report in watcher.config.channel:
            log_report(report)
    finally:
        await watcher.destroy()
        await watcher.wait_closed()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll a directory for changed files")
    parser.add_argument("--root", dest="root_directory", help="Directory to watch")
    parser.add_argument(
        "--suffix",
        dest="match_suffixes",
        action="append",
        help="File suffix to match, may be given more than once",
    )
    parser.add_argument(
        "--mode",
        dest="scan_mode",
        choices=["directory", "subdirectories"],
        help="Scan the root directory itself or its immediate subdirectories",
    )
    parser.add_argument(
        "--interval",
        dest="refresh_interval_seconds",
        type=float,
        help="Seconds between scans",
    )
    return parser.parse_args(argv)


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    """Settings from env/settings file, with command line values taking precedence."""
    args = _parse_args(argv)
    overrides: Dict[str, Any] = {
        key: value for key, value in vars(args).items() if value is not None
    }
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}")
        return 2

    setup_logging(settings)

    config_info = settings.config_file_info
    logging.info(f"Configuration loaded from: {config_info['active_config_file']}")
    logging.info(f"Running on hostname: {config_info['hostname']}")

    watcher = build_watcher(settings)
    try:
        asyncio.run(run(watcher))
    except KeyboardInterrupt:
        logging.info("Watcher interrupted, shutting down")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
