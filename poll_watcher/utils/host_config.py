"""
Host-specific configuration file selection.

A machine can carry its own ``{hostname}-watcher.env`` next to the shared
``watcher.env``; the host file wins when it exists.
"""

import logging
import socket
from pathlib import Path

BASE_SETTINGS_FILE = "watcher.env"


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split(".")[0]


def get_hostname_settings_file() -> str:
    """
    Get the settings file to load for this host.

    Returns:
        str: ``{hostname}-watcher.env`` if present, otherwise ``watcher.env``
    """
    try:
        host_settings = Path(f"{get_hostname()}-{BASE_SETTINGS_FILE}")
        if host_settings.exists():
            logging.debug(f"Using host-specific configuration: {host_settings}")
            return str(host_settings)
    except OSError as e:
        logging.error(f"Error resolving host-specific settings: {e}")

    return BASE_SETTINGS_FILE


def list_all_settings_files() -> list[str]:
    """List all available settings files (base + host-specific)."""
    settings_files = []

    if Path(BASE_SETTINGS_FILE).exists():
        settings_files.append(BASE_SETTINGS_FILE)

    for file_path in sorted(Path(".").glob(f"*-{BASE_SETTINGS_FILE}")):
        settings_files.append(str(file_path))

    return settings_files
