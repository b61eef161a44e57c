from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from spawnwatch.domain.status import (
    RespawnStatus,
    evaluate,
    should_prune,
    sort_priority,
)
from spawnwatch.domain.window import RespawnWindow

KILLED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
FIELD_BOSS = RespawnWindow(min_respawn_minutes=45, max_respawn_minutes=68, expired_grace_minutes=10)


def _at(minutes: int = 0, seconds: int = 0) -> datetime:
    return KILLED_AT + timedelta(minutes=minutes, seconds=seconds)


@pytest.mark.parametrize(
    ("minutes", "seconds", "expected"),
    [
        (0, 0, RespawnStatus.NOT_YET_RESPAWNED),
        (43, 59, RespawnStatus.NOT_YET_RESPAWNED),
        (44, 0, RespawnStatus.ABOUT_TO_RESPAWN),
        (44, 30, RespawnStatus.ABOUT_TO_RESPAWN),
        (44, 59, RespawnStatus.ABOUT_TO_RESPAWN),
        (45, 0, RespawnStatus.LIKELY_ABSENT),
        (56, 29, RespawnStatus.LIKELY_ABSENT),
        (56, 30, RespawnStatus.LIKELY_PRESENT),
        (68, 0, RespawnStatus.LIKELY_PRESENT),
        (68, 1, RespawnStatus.OVERDUE),
        (69, 0, RespawnStatus.OVERDUE),
    ],
)
def test_field_boss_timeline(minutes: int, seconds: int, expected: RespawnStatus) -> None:
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(minutes, seconds)).status is expected


def test_sub_second_elapsed_is_floored() -> None:
    now = KILLED_AT + timedelta(minutes=45) - timedelta(milliseconds=1)
    assert evaluate(KILLED_AT, FIELD_BOSS, now).status is RespawnStatus.ABOUT_TO_RESPAWN


def test_overdue_minutes_use_whole_minutes() -> None:
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(68, 1)).overdue_minutes == 0
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(69, 0)).overdue_minutes == 1
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(79, 59)).overdue_minutes == 11


def test_overdue_minutes_absent_inside_window() -> None:
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(60)).overdue_minutes is None


def test_countdown_rounds_up_until_window_closes() -> None:
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(0)).countdown_minutes == 68
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(0, 10)).countdown_minutes == 68
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(67, 59)).countdown_minutes == 1
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(68, 0)).countdown_minutes is None
    assert evaluate(KILLED_AT, FIELD_BOSS, _at(70, 0)).countdown_minutes is None


def test_priority_bands_never_overlap() -> None:
    overdue = evaluate(KILLED_AT, FIELD_BOSS, _at(75)).priority
    present = evaluate(KILLED_AT, FIELD_BOSS, _at(60)).priority
    absent = evaluate(KILLED_AT, FIELD_BOSS, _at(50)).priority
    about = evaluate(KILLED_AT, FIELD_BOSS, _at(44, 30)).priority
    waiting = evaluate(KILLED_AT, FIELD_BOSS, _at(10)).priority
    assert overdue < present < absent < about < waiting
    assert overdue == 10000 - 75
    assert present == 20000 + 60
    assert waiting == 50000 + 10


def test_longer_overdue_sorts_first() -> None:
    assert sort_priority(RespawnStatus.OVERDUE, 80 * 60) < sort_priority(RespawnStatus.OVERDUE, 70 * 60)


def test_non_overdue_band_adds_minutes_since_kill() -> None:
    assert sort_priority(RespawnStatus.LIKELY_PRESENT, 58 * 60) < sort_priority(
        RespawnStatus.LIKELY_PRESENT, 62 * 60
    )


def test_invalid_terminal_policy_replaces_overdue() -> None:
    evaluation = evaluate(KILLED_AT, FIELD_BOSS, _at(200), terminal_policy="invalid")
    assert evaluation.status is RespawnStatus.INVALID
    assert evaluation.overdue_minutes == 132
    assert evaluation.priority == 60000 + 200
    assert not should_prune(evaluation, FIELD_BOSS)


def test_prune_only_after_grace_exceeded() -> None:
    at_grace = evaluate(KILLED_AT, FIELD_BOSS, _at(78, 59))
    past_grace = evaluate(KILLED_AT, FIELD_BOSS, _at(79, 0))
    assert at_grace.overdue_minutes == 10
    assert not should_prune(at_grace, FIELD_BOSS)
    assert past_grace.overdue_minutes == 11
    assert should_prune(past_grace, FIELD_BOSS)


def test_window_without_grace_is_never_pruned() -> None:
    window = RespawnWindow(min_respawn_minutes=5, max_respawn_minutes=10)
    evaluation = evaluate(KILLED_AT, window, _at(500))
    assert evaluation.status is RespawnStatus.OVERDUE
    assert not should_prune(evaluation, window)


@pytest.mark.parametrize(
    ("min_minutes", "max_minutes", "grace"),
    [(0, 10, 5), (10, 10, 5), (12, 10, 5), (5, 10, 0), (-1, 10, None), (True, 10, None)],
)
def test_invalid_windows_are_rejected(min_minutes, max_minutes, grace) -> None:
    with pytest.raises(ValueError):
        RespawnWindow(min_minutes, max_minutes, grace)
