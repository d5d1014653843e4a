# The watch loop and the objects it hands to its consumer.
from .change_report import ChangeReport
from .clock import Clock, SystemClock
from .report_channel import ReportChannel
from .snapshot_differ import SnapshotDiff, diff_snapshots
from .watcher import Watcher, create_watcher

__all__ = [
    "ChangeReport",
    "Clock",
    "ReportChannel",
    "SnapshotDiff",
    "SystemClock",
    "Watcher",
    "create_watcher",
    "diff_snapshots",
]
