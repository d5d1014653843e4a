# Stateless helpers that produce snapshots for the Watcher. No scan function keeps state between calls.
from .domain_objects import Snapshot, ScanFunction, WatchConfiguration
from .scan_functions import (
    SCAN_FUNCTIONS,
    get_scan_function,
    scan_files_in_directory,
    scan_files_in_subdirectories,
)
from .suffix_matcher import match_suffix, matches_any_suffix

__all__ = [
    "SCAN_FUNCTIONS",
    "ScanFunction",
    "Snapshot",
    "WatchConfiguration",
    "get_scan_function",
    "match_suffix",
    "matches_any_suffix",
    "scan_files_in_directory",
    "scan_files_in_subdirectories",
]
