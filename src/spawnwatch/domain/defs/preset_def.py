"""Preset definition data structures."""
from __future__ import annotations

from dataclasses import dataclass

from spawnwatch.domain.window import RespawnWindow


@dataclass(slots=True)
class PresetDef:
    """A named, fixed respawn window that locks the settings when chosen."""

    id: str
    name: str
    min_respawn_minutes: int
    max_respawn_minutes: int
    expired_grace_minutes: int | None = None
    notes: str | None = None

    def to_window(self) -> RespawnWindow:
        return RespawnWindow(
            min_respawn_minutes=self.min_respawn_minutes,
            max_respawn_minutes=self.max_respawn_minutes,
            expired_grace_minutes=self.expired_grace_minutes,
        )
