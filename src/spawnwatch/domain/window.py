"""Respawn window values and the editable global settings."""
from __future__ import annotations

from dataclasses import dataclass

CUSTOM_PRESET_ID = "custom"
DEFAULT_EXPIRED_GRACE_MINUTES = 5


@dataclass(frozen=True, slots=True)
class RespawnWindow:
    """Per-channel snapshot of the respawn bounds taken at kill time."""

    min_respawn_minutes: int
    max_respawn_minutes: int
    expired_grace_minutes: int | None = None

    def __post_init__(self) -> None:
        if not is_valid_window(
            self.min_respawn_minutes, self.max_respawn_minutes, self.expired_grace_minutes
        ):
            raise ValueError(
                "Respawn window needs positive bounds with max > min "
                f"(got min={self.min_respawn_minutes}, max={self.max_respawn_minutes}, "
                f"grace={self.expired_grace_minutes})."
            )

    @property
    def min_seconds(self) -> int:
        return self.min_respawn_minutes * 60

    @property
    def max_seconds(self) -> int:
        return self.max_respawn_minutes * 60


@dataclass(slots=True)
class RespawnSettings:
    """The single owned configuration new and re-killed channels copy from."""

    min_respawn_minutes: int = 0
    max_respawn_minutes: int = 0
    expired_grace_minutes: int | None = DEFAULT_EXPIRED_GRACE_MINUTES
    preset_id: str | None = None

    def is_ready(self) -> bool:
        """Return True when channels may be added or killed."""
        return is_valid_window(
            self.min_respawn_minutes, self.max_respawn_minutes, self.expired_grace_minutes
        )

    def is_locked(self) -> bool:
        """A non-custom preset pins the editable fields."""
        return self.preset_id is not None and self.preset_id != CUSTOM_PRESET_ID

    def to_window(self) -> RespawnWindow:
        return RespawnWindow(
            min_respawn_minutes=self.min_respawn_minutes,
            max_respawn_minutes=self.max_respawn_minutes,
            expired_grace_minutes=self.expired_grace_minutes,
        )


def is_valid_window(min_minutes: object, max_minutes: object, grace_minutes: object) -> bool:
    """Check bounds the way the settings form validates them."""
    if not _is_positive_int(min_minutes) or not _is_positive_int(max_minutes):
        return False
    if grace_minutes is not None and not _is_positive_int(grace_minutes):
        return False
    return max_minutes > min_minutes  # type: ignore[operator]


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
