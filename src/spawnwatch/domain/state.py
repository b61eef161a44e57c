"""Domain-level tracker state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from spawnwatch.domain.entity import TrackedEntity
from spawnwatch.domain.window import RespawnSettings


@dataclass
class TrackerState:
    """Everything the snapshot persists: channels plus the active settings."""

    channels: List[TrackedEntity] = field(default_factory=list)
    settings: RespawnSettings = field(default_factory=RespawnSettings)

    def find(self, entity_id: str) -> TrackedEntity | None:
        for channel in self.channels:
            if channel.id == entity_id:
                return channel
        return None

    def selected(self) -> List[TrackedEntity]:
        return [channel for channel in self.channels if channel.selected]
