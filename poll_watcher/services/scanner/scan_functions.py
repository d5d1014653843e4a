"""
Built-in scan functions.

Both functions only read from the filesystem. Listing the root directory is
the only failure that aborts a scan; every other failure simply omits the
affected entry from the snapshot.

Consider the following file tree::

    My Files/
    |-- SomeFile.txt
    |-- Awesome.cfg
    |-- stuff/
        |-- CoolStory.txt

With ``match_suffixes=[".txt"]``, ``scan_files_in_directory`` finds
``My Files/SomeFile.txt`` and ``scan_files_in_subdirectories`` finds
``My Files/stuff/CoolStory.txt``.
"""

import logging
import os
import stat
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import aiofiles.os

from poll_watcher.core.exceptions import ConfigurationError, ScanError
from poll_watcher.models import MatchInfo
from .domain_objects import ScanFunction, Snapshot, WatchConfiguration
from .suffix_matcher import match_suffix


async def _list_root(root_directory: str) -> List[str]:
    try:
        return await aiofiles.os.listdir(root_directory)
    except OSError as e:
        raise ScanError(str(e), root_read_failed=True) from e


async def _stat_entry(path: str) -> Optional[os.stat_result]:
    try:
        return await aiofiles.os.stat(path)
    except OSError as e:
        logging.debug(f"Skipping unreadable entry {path}: {e}")
        return None


async def _collect_matches(
    directory: str, names: Sequence[str], suffixes: Sequence[str], result: Snapshot
) -> None:
    for name in names:
        suffix = match_suffix(name, suffixes)
        if suffix is None:
            continue

        file_path = os.path.abspath(os.path.join(directory, name))
        stat_result = await _stat_entry(file_path)
        if stat_result is None or stat.S_ISDIR(stat_result.st_mode):
            continue

        result[file_path] = MatchInfo(
            path=file_path,
            mod_time=datetime.fromtimestamp(stat_result.st_mtime),
            matched_on=suffix,
        )


async def scan_files_in_directory(config: WatchConfiguration) -> Snapshot:
    """Scan the immediate children of the root directory."""
    names = await _list_root(config.root_directory)

    result: Snapshot = {}
    await _collect_matches(config.root_directory, names, config.match_suffixes, result)

    logging.debug(
        f"Directory scan of {config.root_directory}: {len(result)} matching files"
    )
    return result


async def scan_files_in_subdirectories(config: WatchConfiguration) -> Snapshot:
    """Scan the children of each immediate subdirectory of the root directory."""
    names = await _list_root(config.root_directory)

    result: Snapshot = {}
    for name in names:
        sub_dir_path = os.path.join(config.root_directory, name)

        stat_result = await _stat_entry(sub_dir_path)
        if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
            continue

        try:
            children = await aiofiles.os.listdir(sub_dir_path)
        except OSError as e:
            logging.debug(f"Skipping unreadable subdirectory {sub_dir_path}: {e}")
            continue

        await _collect_matches(sub_dir_path, children, config.match_suffixes, result)

    logging.debug(
        f"Subdirectory scan of {config.root_directory}: {len(result)} matching files"
    )
    return result


SCAN_FUNCTIONS: Dict[str, ScanFunction] = {
    "directory": scan_files_in_directory,
    "subdirectories": scan_files_in_subdirectories,
}


def get_scan_function(mode: str) -> ScanFunction:
    try:
        return SCAN_FUNCTIONS[mode]
    except KeyError:
        raise ConfigurationError(
            f"Unknown scan mode '{mode}', expected one of: {', '.join(SCAN_FUNCTIONS)}"
        ) from None
