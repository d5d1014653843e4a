# poll_watcher/core/events/watcher_events.py
from dataclasses import dataclass

from poll_watcher.core.events.domain_event import DomainEvent
from poll_watcher.models import WatcherState


@dataclass(frozen=True, kw_only=True)
class WatcherStatusChangedEvent(DomainEvent):
    """Event published when a watcher is started, stopped or destroyed."""
    old_state: WatcherState
    new_state: WatcherState

    def __str__(self) -> str:
        return (
            f"{self.event_name}({self.root_directory}: "
            f"{self.old_state.value} -> {self.new_state.value})"
        )
