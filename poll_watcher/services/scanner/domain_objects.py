from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Sequence

from poll_watcher.core.exceptions import ConfigurationError
from poll_watcher.models import MatchInfo

if TYPE_CHECKING:
    from poll_watcher.services.watcher.report_channel import ReportChannel

DEFAULT_REFRESH_INTERVAL_SECONDS = 10.0

# Absolute file path -> MatchInfo. Never mutated after a scan returns it.
Snapshot = Dict[str, MatchInfo]

ScanFunction = Callable[["WatchConfiguration"], Awaitable[Snapshot]]


@dataclass(frozen=True)
class WatchConfiguration:
    """Configuration object for a single Watcher, validated on construction."""

    root_directory: str
    match_suffixes: Sequence[str]
    channel: "ReportChannel"
    scan_function: ScanFunction
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if not self.root_directory or not self.root_directory.strip():
            raise ConfigurationError("The directory path to watch cannot be empty")

        if isinstance(self.match_suffixes, str):
            raise ConfigurationError("Match suffixes must be a list of strings")

        suffixes = tuple(self.match_suffixes or ())
        if not suffixes:
            raise ConfigurationError("At least one file suffix to match is required")
        if any(not suffix or not suffix.strip() for suffix in suffixes):
            raise ConfigurationError("File suffixes to match cannot be empty")
        object.__setattr__(self, "match_suffixes", suffixes)

        if self.channel is None:
            raise ConfigurationError("The report channel cannot be None")

        if self.scan_function is None or not callable(self.scan_function):
            raise ConfigurationError("The scan function must be a callable")

    @property
    def effective_refresh_interval(self) -> float:
        if self.refresh_interval_seconds is None or self.refresh_interval_seconds <= 0:
            return DEFAULT_REFRESH_INTERVAL_SECONDS
        return float(self.refresh_interval_seconds)
