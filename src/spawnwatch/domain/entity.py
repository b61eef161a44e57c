"""Tracked channel entity."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from spawnwatch.domain.window import RespawnWindow


@dataclass(slots=True)
class TrackedEntity:
    """One channel whose target respawns inside a window after each kill."""

    id: str
    kill_timestamp: datetime
    window: RespawnWindow
    selected: bool = False

    def record_kill(self, killed_at: datetime, window: RespawnWindow) -> None:
        """Reset the kill time and window together and drop the selection."""
        self.kill_timestamp = killed_at
        self.window = window
        self.selected = False
