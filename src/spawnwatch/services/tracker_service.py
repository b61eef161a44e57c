"""Respawn tracker: owns the channel collection and evaluates it per tick."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

from spawnwatch.core.clock import Clock, SystemClock
from spawnwatch.core.types import SortPolicy, TerminalPolicy
from spawnwatch.data.repositories import PresetsRepository
from spawnwatch.domain.entity import TrackedEntity
from spawnwatch.domain.state import TrackerState
from spawnwatch.domain.status import RespawnStatus, evaluate, should_prune
from spawnwatch.domain.window import (
    CUSTOM_PRESET_ID,
    RespawnSettings,
    RespawnWindow,
    is_valid_window,
)
from spawnwatch.services.errors import PresetError

logger = logging.getLogger(__name__)

MAX_CHANNEL_ID_LENGTH = 4


@dataclass(slots=True)
class TrackerEvent:
    """Base class for tracker mutation outcomes."""


@dataclass(slots=True)
class ChannelAddedEvent(TrackerEvent):
    entity_id: str
    kill_timestamp: datetime


@dataclass(slots=True)
class ChannelsKilledEvent(TrackerEvent):
    entity_ids: List[str]
    kill_timestamp: datetime


@dataclass(slots=True)
class ChannelsRemovedEvent(TrackerEvent):
    entity_ids: List[str]


@dataclass(slots=True)
class SettingsUpdatedEvent(TrackerEvent):
    min_respawn_minutes: int
    max_respawn_minutes: int
    expired_grace_minutes: int | None


@dataclass(slots=True)
class PresetAppliedEvent(TrackerEvent):
    preset_id: str
    name: str
    locked: bool


@dataclass(slots=True)
class ActionFailedEvent(TrackerEvent):
    reason: str
    message: str


@dataclass(slots=True)
class ChannelView:
    """Render-ready evaluation of one channel."""

    entity_id: str
    status: RespawnStatus
    priority: int
    countdown_minutes: int | None
    overdue_minutes: int | None
    selected: bool
    kill_timestamp: datetime
    window: RespawnWindow

    @property
    def expired(self) -> bool:
        return self.status in (RespawnStatus.OVERDUE, RespawnStatus.INVALID)


@dataclass(slots=True)
class BoardView:
    """Ordered channel views plus the ids dropped during the pass."""

    channels: List[ChannelView] = field(default_factory=list)
    pruned_ids: List[str] = field(default_factory=list)


class RespawnTracker:
    """Single owner of tracked channels and the active respawn settings."""

    def __init__(
        self,
        state: TrackerState | None = None,
        *,
        presets_repo: PresetsRepository | None = None,
        sort_policy: SortPolicy = "banded",
        terminal_policy: TerminalPolicy = "prune",
        clock: Clock | None = None,
    ) -> None:
        self._state = state if state is not None else TrackerState()
        self._presets_repo = presets_repo
        self._sort_policy: SortPolicy = sort_policy
        self._terminal_policy: TerminalPolicy = terminal_policy
        self._clock = clock or SystemClock()

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def settings(self) -> RespawnSettings:
        return self._state.settings

    @property
    def sort_policy(self) -> SortPolicy:
        return self._sort_policy

    @property
    def terminal_policy(self) -> TerminalPolicy:
        return self._terminal_policy

    def set_policies(self, sort_policy: SortPolicy, terminal_policy: TerminalPolicy) -> None:
        """Switch ordering and expiry handling; takes effect on the next evaluation."""
        self._sort_policy = sort_policy
        self._terminal_policy = terminal_policy
        logger.info("policies set: sort=%s terminal=%s", sort_policy, terminal_policy)

    def is_ready(self) -> bool:
        return self._state.settings.is_ready()

    def has_selection(self) -> bool:
        return any(channel.selected for channel in self._state.channels)

    def channel_ids(self) -> List[str]:
        return [channel.id for channel in self._state.channels]

    def evaluate_all(self, now: datetime | None = None) -> BoardView:
        """Evaluate every channel, drop expired ones and reorder for display."""
        now = self._resolve_now(now)
        kept: List[TrackedEntity] = []
        views: List[ChannelView] = []
        pruned: List[str] = []
        for channel in self._state.channels:
            evaluation = evaluate(
                channel.kill_timestamp,
                channel.window,
                now,
                terminal_policy=self._terminal_policy,
            )
            if self._terminal_policy == "prune" and should_prune(evaluation, channel.window):
                pruned.append(channel.id)
                continue
            kept.append(channel)
            views.append(
                ChannelView(
                    entity_id=channel.id,
                    status=evaluation.status,
                    priority=evaluation.priority,
                    countdown_minutes=evaluation.countdown_minutes,
                    overdue_minutes=evaluation.overdue_minutes,
                    selected=channel.selected,
                    kill_timestamp=channel.kill_timestamp,
                    window=channel.window,
                )
            )

        if self._sort_policy == "kill_time":
            order = sorted(range(len(views)), key=lambda idx: views[idx].kill_timestamp)
        else:
            order = sorted(range(len(views)), key=lambda idx: views[idx].priority)
        self._state.channels = [kept[idx] for idx in order]
        if pruned:
            logger.info("pruned expired channels: %s", ", ".join(pruned))
        logger.debug("evaluated %d channels at %s", len(views), now.isoformat())
        return BoardView(channels=[views[idx] for idx in order], pruned_ids=pruned)

    def add_channel(self, raw_id: str, now: datetime | None = None) -> TrackerEvent:
        """Start tracking a channel killed right now."""
        entity_id = (raw_id or "").strip()
        if (
            not entity_id
            or not (entity_id.isascii() and entity_id.isdigit())
            or len(entity_id) > MAX_CHANNEL_ID_LENGTH
        ):
            return ActionFailedEvent(
                reason="invalid_id",
                message=f"Enter a valid channel number (1-{MAX_CHANNEL_ID_LENGTH} digits).",
            )
        if not self.is_ready():
            return ActionFailedEvent(reason="not_ready", message="Set the respawn window first.")
        if self._state.find(entity_id) is not None:
            return ActionFailedEvent(
                reason="duplicate_id", message=f"Channel {entity_id} is already tracked."
            )
        killed_at = self._resolve_now(now)
        self._state.channels.append(
            TrackedEntity(
                id=entity_id,
                kill_timestamp=killed_at,
                window=self._state.settings.to_window(),
            )
        )
        logger.info("added channel %s", entity_id)
        return ChannelAddedEvent(entity_id=entity_id, kill_timestamp=killed_at)

    def kill_selected(self, now: datetime | None = None) -> TrackerEvent | None:
        """Record a fresh kill on every selected channel; None when none is selected."""
        selected = self._state.selected()
        if not selected:
            return None
        if not self.is_ready():
            return ActionFailedEvent(reason="not_ready", message="Set the respawn window first.")
        killed_at = self._resolve_now(now)
        window = self._state.settings.to_window()
        for channel in selected:
            channel.record_kill(killed_at, window)
        entity_ids = [channel.id for channel in selected]
        logger.info("recorded kill on channels: %s", ", ".join(entity_ids))
        return ChannelsKilledEvent(entity_ids=entity_ids, kill_timestamp=killed_at)

    def remove_selected(self, *, confirmed: bool) -> TrackerEvent:
        """Delete every selected channel once the caller has confirmed."""
        selected_ids = [channel.id for channel in self._state.selected()]
        if not selected_ids:
            return ActionFailedEvent(
                reason="no_selection", message="Select the channels to remove first."
            )
        if not confirmed:
            return ActionFailedEvent(reason="not_confirmed", message="Removal cancelled.")
        self._state.channels = [channel for channel in self._state.channels if not channel.selected]
        logger.info("removed channels: %s", ", ".join(selected_ids))
        return ChannelsRemovedEvent(entity_ids=selected_ids)

    def toggle_selection(self, entity_id: str) -> bool | None:
        """Flip the selection flag; None when the channel is unknown."""
        channel = self._state.find(entity_id)
        if channel is None:
            return None
        channel.selected = not channel.selected
        return channel.selected

    def clear_all(self) -> None:
        """Forget every channel and reset the settings to defaults."""
        self._state = TrackerState()
        logger.info("cleared all channels and settings")

    def update_settings(
        self,
        min_respawn_minutes: int,
        max_respawn_minutes: int,
        expired_grace_minutes: int | None,
    ) -> TrackerEvent:
        """Replace the editable window bounds used by future adds and kills."""
        settings = self._state.settings
        if settings.is_locked():
            return ActionFailedEvent(
                reason="preset_locked",
                message="Switch to the custom preset before editing the window.",
            )
        if not is_valid_window(min_respawn_minutes, max_respawn_minutes, expired_grace_minutes):
            return ActionFailedEvent(
                reason="invalid_settings",
                message="Respawn minutes must be positive and max must exceed min.",
            )
        settings.min_respawn_minutes = min_respawn_minutes
        settings.max_respawn_minutes = max_respawn_minutes
        settings.expired_grace_minutes = expired_grace_minutes
        logger.info(
            "settings updated: min=%s max=%s grace=%s",
            min_respawn_minutes,
            max_respawn_minutes,
            expired_grace_minutes,
        )
        return SettingsUpdatedEvent(
            min_respawn_minutes=min_respawn_minutes,
            max_respawn_minutes=max_respawn_minutes,
            expired_grace_minutes=expired_grace_minutes,
        )

    def apply_preset(self, preset_id: str) -> PresetAppliedEvent:
        """Copy a preset's bounds into the settings and lock them."""
        settings = self._state.settings
        if preset_id == CUSTOM_PRESET_ID:
            settings.preset_id = CUSTOM_PRESET_ID
            return PresetAppliedEvent(preset_id=preset_id, name="Custom", locked=False)
        if self._presets_repo is None:
            raise PresetError(f"Unknown preset '{preset_id}'.")
        try:
            preset = self._presets_repo.get(preset_id)
        except KeyError as exc:
            raise PresetError(f"Unknown preset '{preset_id}'.") from exc
        settings.min_respawn_minutes = preset.min_respawn_minutes
        settings.max_respawn_minutes = preset.max_respawn_minutes
        settings.expired_grace_minutes = preset.expired_grace_minutes
        settings.preset_id = preset.id
        logger.info("applied preset %s", preset.id)
        return PresetAppliedEvent(preset_id=preset.id, name=preset.name, locked=True)

    def load_state(self, state: TrackerState) -> None:
        """Swap in a fully validated state."""
        self._state = state

    def replace_channels(self, channels: Sequence[TrackedEntity]) -> None:
        """Swap the collection for imported channels, keeping the settings."""
        seen: set[str] = set()
        for channel in channels:
            if channel.id in seen:
                raise ValueError(f"Duplicate channel id '{channel.id}'.")
            seen.add(channel.id)
        self._state.channels = list(channels)
        logger.info("imported %d channels", len(self._state.channels))

    def _resolve_now(self, now: datetime | None) -> datetime:
        return now if now is not None else self._clock.now()
