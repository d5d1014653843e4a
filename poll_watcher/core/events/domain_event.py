"""
Base class for events raised by watchers.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    Something that happened to the watcher of one directory.

    Subscribers use ``root_directory`` to tell watchers apart when several
    share a single event bus.

    Attributes:
        root_directory: The directory watched by the watcher that raised the event.
        event_id: Unique id of this event instance.
        occurred_at: UTC time the event was created.
    """

    root_directory: str
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_name(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return f"{self.event_name}({self.root_directory} @ {self.occurred_at.isoformat()})"
