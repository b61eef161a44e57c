"""Pure respawn status evaluation for a single channel."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from spawnwatch.core.types import TerminalPolicy
from spawnwatch.domain.window import RespawnWindow

BAND_WIDTH = 10000
WARNING_LEAD_SECONDS = 60


class RespawnStatus(Enum):
    """Where a channel sits relative to its respawn window."""

    NOT_YET_RESPAWNED = "NOT_YET_RESPAWNED"
    ABOUT_TO_RESPAWN = "ABOUT_TO_RESPAWN"
    LIKELY_ABSENT = "LIKELY_ABSENT"
    LIKELY_PRESENT = "LIKELY_PRESENT"
    OVERDUE = "OVERDUE"
    INVALID = "INVALID"


STATUS_BANDS: dict[RespawnStatus, int] = {
    RespawnStatus.OVERDUE: 1,
    RespawnStatus.LIKELY_PRESENT: 2,
    RespawnStatus.LIKELY_ABSENT: 3,
    RespawnStatus.ABOUT_TO_RESPAWN: 4,
    RespawnStatus.NOT_YET_RESPAWNED: 5,
    RespawnStatus.INVALID: 6,
}


@dataclass(frozen=True, slots=True)
class StatusEvaluation:
    """Result of classifying one channel at one instant."""

    status: RespawnStatus
    elapsed_seconds: int
    priority: int
    countdown_minutes: int | None = None
    overdue_minutes: int | None = None


def elapsed_seconds(kill_timestamp: datetime, now: datetime) -> int:
    """Whole seconds since the kill, floored."""
    return math.floor((now - kill_timestamp).total_seconds())


def classify(elapsed: int, window: RespawnWindow) -> RespawnStatus:
    """Map elapsed seconds onto the window; bounds are checked in order."""
    min_s = window.min_seconds
    max_s = window.max_seconds
    half_s = min_s + (max_s - min_s) / 2
    warn_s = min_s - WARNING_LEAD_SECONDS
    if elapsed < warn_s:
        return RespawnStatus.NOT_YET_RESPAWNED
    if elapsed < min_s:
        return RespawnStatus.ABOUT_TO_RESPAWN
    if elapsed < half_s:
        return RespawnStatus.LIKELY_ABSENT
    if elapsed <= max_s:
        return RespawnStatus.LIKELY_PRESENT
    return RespawnStatus.OVERDUE


def overdue_minutes(elapsed: int, window: RespawnWindow) -> int:
    """Integer minutes past the max bound; 0 during the first partial minute."""
    return elapsed // 60 - window.max_respawn_minutes


def countdown_minutes(elapsed: int, window: RespawnWindow) -> int | None:
    """Minutes (rounded up) until the window closes, or None once it has."""
    remaining = window.max_seconds - elapsed
    if remaining <= 0:
        return None
    return math.ceil(remaining / 60)


def sort_priority(status: RespawnStatus, elapsed: int) -> int:
    """Lower sorts first.

    Overdue channels subtract minutes since kill, so the longest overdue
    leads. Every other band adds them, so the most recent kill leads.
    """
    minutes_since_kill = elapsed // 60
    band = STATUS_BANDS[status]
    if status is RespawnStatus.OVERDUE:
        return band * BAND_WIDTH - minutes_since_kill
    return band * BAND_WIDTH + minutes_since_kill


def evaluate(
    kill_timestamp: datetime,
    window: RespawnWindow,
    now: datetime,
    *,
    terminal_policy: TerminalPolicy = "prune",
) -> StatusEvaluation:
    """Classify a channel and derive its priority and countdown."""
    elapsed = elapsed_seconds(kill_timestamp, now)
    status = classify(elapsed, window)
    overdue: int | None = None
    if status is RespawnStatus.OVERDUE:
        overdue = overdue_minutes(elapsed, window)
        if terminal_policy == "invalid":
            status = RespawnStatus.INVALID
    return StatusEvaluation(
        status=status,
        elapsed_seconds=elapsed,
        priority=sort_priority(status, elapsed),
        countdown_minutes=countdown_minutes(elapsed, window),
        overdue_minutes=overdue,
    )


def should_prune(evaluation: StatusEvaluation, window: RespawnWindow) -> bool:
    """Overdue channels are dropped once past their grace period."""
    if evaluation.status is not RespawnStatus.OVERDUE:
        return False
    if window.expired_grace_minutes is None or evaluation.overdue_minutes is None:
        return False
    return evaluation.overdue_minutes > window.expired_grace_minutes
