"""Shared type aliases for the core and domain layers."""
from typing import Literal

SortPolicy = Literal["banded", "kill_time"]
TerminalPolicy = Literal["prune", "invalid"]

SORT_POLICIES: tuple[SortPolicy, ...] = ("banded", "kill_time")
TERMINAL_POLICIES: tuple[TerminalPolicy, ...] = ("prune", "invalid")

__all__ = ["SortPolicy", "TerminalPolicy", "SORT_POLICIES", "TERMINAL_POLICIES"]
