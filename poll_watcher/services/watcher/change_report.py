from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from poll_watcher.core.exceptions import ScanError
from poll_watcher.models import MatchInfo
from poll_watcher.services.scanner.suffix_matcher import matches_any_suffix
from .snapshot_differ import SnapshotDiff


@dataclass(frozen=True)
class ChangeReport:
    """
    Read-only result of one scan cycle, handed to the consumer via the channel.

    A report either carries an error (and no changes) or the updated and
    deleted files found by diffing against the previous snapshot.
    """

    updated: Tuple[MatchInfo, ...] = ()
    deleted: Tuple[MatchInfo, ...] = ()
    error: Optional[ScanError] = None

    @classmethod
    def from_diff(cls, diff: SnapshotDiff) -> "ChangeReport":
        return cls(updated=tuple(diff.updated), deleted=tuple(diff.deleted))

    @classmethod
    def from_error(cls, error: ScanError) -> "ChangeReport":
        return cls(error=error)

    def is_error(self) -> bool:
        return self.error is not None

    def is_root_read_error(self) -> bool:
        return self.error is not None and self.error.root_directory_read_failed()

    def error_details(self) -> str:
        return self.error.reason if self.error is not None else ""

    def has_changes(self) -> bool:
        return bool(self.updated or self.deleted)

    def updated_paths(self) -> List[str]:
        return [info.path for info in self.updated]

    def deleted_paths(self) -> List[str]:
        return [info.path for info in self.deleted]

    def updated_paths_with_suffixes(self, suffixes: Iterable[str]) -> List[str]:
        return _filter_paths(self.updated, tuple(suffixes), keep_matches=True)

    def updated_paths_without_suffixes(self, suffixes: Iterable[str]) -> List[str]:
        return _filter_paths(self.updated, tuple(suffixes), keep_matches=False)

    def deleted_paths_with_suffixes(self, suffixes: Iterable[str]) -> List[str]:
        return _filter_paths(self.deleted, tuple(suffixes), keep_matches=True)

    def deleted_paths_without_suffixes(self, suffixes: Iterable[str]) -> List[str]:
        return _filter_paths(self.deleted, tuple(suffixes), keep_matches=False)

    def __str__(self) -> str:
        if self.is_error():
            return f"ChangeReport(error={self.error_details()!r}, root_read={self.is_root_read_error()})"
        return f"ChangeReport(updated={len(self.updated)}, deleted={len(self.deleted)})"


def _filter_paths(
    infos: Tuple[MatchInfo, ...], suffixes: Tuple[str, ...], keep_matches: bool
) -> List[str]:
    return [
        info.path
        for info in infos
        if matches_any_suffix(info.path, suffixes) == keep_matches
    ]
