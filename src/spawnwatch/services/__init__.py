"""Service layer exports."""

from .errors import PresetError, SaveLoadError, ShareDecodeError
from .save_service import SaveService
from .share_service import ShareService
from .ticker import Ticker
from .tracker_service import (
    ActionFailedEvent,
    BoardView,
    ChannelAddedEvent,
    ChannelsKilledEvent,
    ChannelsRemovedEvent,
    ChannelView,
    PresetAppliedEvent,
    RespawnTracker,
    SettingsUpdatedEvent,
    TrackerEvent,
)

__all__ = [
    "ActionFailedEvent",
    "BoardView",
    "ChannelAddedEvent",
    "ChannelsKilledEvent",
    "ChannelsRemovedEvent",
    "ChannelView",
    "PresetAppliedEvent",
    "PresetError",
    "RespawnTracker",
    "SaveLoadError",
    "SaveService",
    "SettingsUpdatedEvent",
    "ShareDecodeError",
    "ShareService",
    "Ticker",
    "TrackerEvent",
]
