"""Domain models and the pure status evaluator."""

from .entity import TrackedEntity
from .state import TrackerState
from .status import RespawnStatus, StatusEvaluation, evaluate
from .window import CUSTOM_PRESET_ID, RespawnSettings, RespawnWindow

__all__ = [
    "CUSTOM_PRESET_ID",
    "RespawnSettings",
    "RespawnStatus",
    "RespawnWindow",
    "StatusEvaluation",
    "TrackedEntity",
    "TrackerState",
    "evaluate",
]
