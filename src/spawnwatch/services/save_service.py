"""Serialization helpers for the persisted tracker snapshot."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence

from spawnwatch.domain.entity import TrackedEntity
from spawnwatch.domain.state import TrackerState
from spawnwatch.domain.window import RespawnSettings, RespawnWindow, is_valid_window
from spawnwatch.services.errors import SaveLoadError

SavePayload = Dict[str, Any]
ChannelPayload = Dict[str, Any]

_MAX_CHANNEL_ID_LENGTH = 4


class SaveService:
    """Converts tracker state to/from a validated, versioned payload."""

    SAVE_VERSION = 1

    def serialize(self, state: TrackerState) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "settings": self._serialize_settings(state.settings),
            "channels": self.serialize_channels(state.channels),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> TrackerState:
        """Rehydrate a TrackerState; nothing is shared with any live state."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("save_version")
        if version != self.SAVE_VERSION:
            raise SaveLoadError(f"Unsupported save version: {version!r}.")
        settings_payload = payload.get("settings")
        if not isinstance(settings_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")
        settings = self._coerce_settings(settings_payload)
        channels = self.deserialize_channels(payload.get("channels"), "channels")
        return TrackerState(channels=channels, settings=settings)

    def serialize_channels(self, channels: Sequence[TrackedEntity]) -> List[ChannelPayload]:
        return [
            {
                "id": channel.id,
                "kill_timestamp": channel.kill_timestamp.isoformat(),
                "min_respawn_minutes": channel.window.min_respawn_minutes,
                "max_respawn_minutes": channel.window.max_respawn_minutes,
                "expired_grace_minutes": channel.window.expired_grace_minutes,
                "selected": channel.selected,
            }
            for channel in channels
        ]

    def deserialize_channels(self, value: Any, context: str) -> List[TrackedEntity]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        channels: List[TrackedEntity] = []
        seen: set[str] = set()
        for index, entry in enumerate(value):
            channel = self._coerce_channel(entry, f"{context}[{index}]")
            if channel.id in seen:
                raise SaveLoadError(f"{context} contains duplicate channel '{channel.id}'.")
            seen.add(channel.id)
            channels.append(channel)
        return channels

    @staticmethod
    def _serialize_settings(settings: RespawnSettings) -> Dict[str, Any]:
        return {
            "min_respawn_minutes": settings.min_respawn_minutes,
            "max_respawn_minutes": settings.max_respawn_minutes,
            "expired_grace_minutes": settings.expired_grace_minutes,
            "preset_id": settings.preset_id,
        }

    def _coerce_settings(self, payload: Mapping[str, Any]) -> RespawnSettings:
        # Settings may be persisted half-filled; only the type is enforced here.
        return RespawnSettings(
            min_respawn_minutes=self._require_non_negative_int(
                payload.get("min_respawn_minutes"), "settings.min_respawn_minutes"
            ),
            max_respawn_minutes=self._require_non_negative_int(
                payload.get("max_respawn_minutes"), "settings.max_respawn_minutes"
            ),
            expired_grace_minutes=self._coerce_optional_int(
                payload.get("expired_grace_minutes"), "settings.expired_grace_minutes"
            ),
            preset_id=self._coerce_optional_str(payload.get("preset_id"), "settings.preset_id"),
        )

    def _coerce_channel(self, value: Any, context: str) -> TrackedEntity:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        entity_id = self._require_str(value.get("id"), f"{context}.id")
        if not (entity_id.isascii() and entity_id.isdigit()) or len(entity_id) > _MAX_CHANNEL_ID_LENGTH:
            raise SaveLoadError(f"{context}.id must be 1-{_MAX_CHANNEL_ID_LENGTH} digits.")
        kill_timestamp = self._require_timestamp(value.get("kill_timestamp"), f"{context}.kill_timestamp")
        min_minutes = self._require_int(value.get("min_respawn_minutes"), f"{context}.min_respawn_minutes")
        max_minutes = self._require_int(value.get("max_respawn_minutes"), f"{context}.max_respawn_minutes")
        grace = self._coerce_optional_int(value.get("expired_grace_minutes"), f"{context}.expired_grace_minutes")
        if not is_valid_window(min_minutes, max_minutes, grace):
            raise SaveLoadError(f"{context} has an invalid respawn window.")
        selected = value.get("selected", False)
        if not isinstance(selected, bool):
            raise SaveLoadError(f"{context}.selected must be a boolean.")
        return TrackedEntity(
            id=entity_id,
            kill_timestamp=kill_timestamp,
            window=RespawnWindow(
                min_respawn_minutes=min_minutes,
                max_respawn_minutes=max_minutes,
                expired_grace_minutes=grace,
            ),
            selected=selected,
        )

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    def _require_non_negative_int(self, value: Any, context: str) -> int:
        value_int = self._require_int(value, context)
        if value_int < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value_int

    def _coerce_optional_int(self, value: Any, context: str) -> int | None:
        if value is None:
            return None
        return self._require_int(value, context)

    def _coerce_optional_str(self, value: Any, context: str) -> str | None:
        if value is None:
            return None
        return self._require_str(value, context)

    def _require_timestamp(self, value: Any, context: str) -> datetime:
        text = self._require_str(value, context)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise SaveLoadError(f"{context} must be an ISO-8601 timestamp.") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
