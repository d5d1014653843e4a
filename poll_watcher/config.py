from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from .utils.host_config import get_hostname_settings_file


class Settings(BaseSettings):
    # Overvåget mappe
    root_directory: str
    match_suffixes: List[str] = [".txt"]  # JSON list in env, e.g. '[".txt", ".cfg"]'
    scan_mode: Literal["directory", "subdirectories"] = "directory"

    # Timing konfiguration
    refresh_interval_seconds: float = 10.0

    # Report channel
    channel_capacity: int = 1  # Reports buffered before the watcher blocks
    emit_empty_reports: bool = False  # Send a report even when nothing changed

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/poll_watcher.log"
    log_retention_days: int = 30

    model_config = SettingsConfigDict(env_file=get_hostname_settings_file())

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent

    @property
    def config_file_info(self) -> dict:
        """Return information about which configuration file is being used."""
        from .utils.host_config import get_hostname, list_all_settings_files

        return {
            "hostname": get_hostname(),
            "active_config_file": get_hostname_settings_file(),
            "all_available_configs": list_all_settings_files(),
        }
