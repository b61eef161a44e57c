"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Sequence

from spawnwatch.domain.status import RespawnStatus
from spawnwatch.services.tracker_service import BoardView, ChannelView

_STATUS_LABELS = {
    RespawnStatus.NOT_YET_RESPAWNED: "Not yet respawned",
    RespawnStatus.ABOUT_TO_RESPAWN: "About to respawn",
    RespawnStatus.LIKELY_ABSENT: "Present (low chance)",
    RespawnStatus.LIKELY_PRESENT: "Present (high chance)",
    RespawnStatus.INVALID: "Invalid",
}


def debug_enabled() -> bool:
    """Return True only when SPAWNWATCH_DEBUG is explicitly set to '1'."""
    return os.getenv("SPAWNWATCH_DEBUG") == "1"


def status_label(view: ChannelView) -> str:
    if view.status is RespawnStatus.OVERDUE:
        return f"Overdue by {view.overdue_minutes} min"
    return _STATUS_LABELS[view.status]


def format_channel_line(view: ChannelView) -> str:
    """One board row: selection marker, channel, status and countdown."""
    marker = "*" if view.selected else " "
    line = f"{marker} ch {view.entity_id:<4}  {status_label(view)}"
    if view.countdown_minutes is not None:
        line += f"  ({view.countdown_minutes} min left)"
    if debug_enabled():
        line += f"  [p={view.priority}]"
    return line


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def render_board(board: BoardView, *, ready: bool, settings_line: str) -> None:
    render_heading("Channels")
    print(settings_line if ready else f"{settings_line} (not ready)")
    if not board.channels:
        print("No channels tracked.")
    for view in board.channels:
        print(format_channel_line(view))
    if board.pruned_ids:
        print(f"Expired and removed: {', '.join(board.pruned_ids)}")
