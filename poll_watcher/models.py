from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WatcherState(str, Enum):
    """
    Livscyklus for en Watcher.

    Stopped -> Running -> Stopped -> Running ... -> Destroyed
    Destroyed er terminal: start() er derefter altid en no-op.
    """

    STOPPED = "Stopped"  # Initial state, eller pauset via stop()
    RUNNING = "Running"  # Polling task er aktiv
    DESTROYED = "Destroyed"  # Terminal, channel er lukket


class MatchInfo(BaseModel):
    """
    A single file that met the match criteria during a scan.

    Two MatchInfo entries for the same path are considered unchanged when
    their modification times are equal.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path to the matched file")
    mod_time: datetime = Field(..., description="Last modification time")
    matched_on: str = Field(..., description="The suffix the file name matched")
