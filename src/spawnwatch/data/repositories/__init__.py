"""Repository exports."""

from .presets_repo import PresetsRepository

__all__ = ["PresetsRepository"]
