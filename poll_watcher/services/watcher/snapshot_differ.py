from dataclasses import dataclass, field
from typing import List

from poll_watcher.models import MatchInfo
from poll_watcher.services.scanner.domain_objects import Snapshot


@dataclass(frozen=True)
class SnapshotDiff:
    """Result of comparing two snapshots. List order carries no meaning."""

    updated: List[MatchInfo] = field(default_factory=list)
    deleted: List[MatchInfo] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.updated or self.deleted)


def diff_snapshots(previous: Snapshot, current: Snapshot) -> SnapshotDiff:
    """
    Compare two snapshots by path and modification time.

    A path is updated when it is new in ``current`` or its modification time
    changed. A path is deleted when it is only present in ``previous``.
    """
    updated = [
        info
        for path, info in current.items()
        if path not in previous or previous[path].mod_time != info.mod_time
    ]
    deleted = [info for path, info in previous.items() if path not in current]
    return SnapshotDiff(updated=updated, deleted=deleted)
