"""Domain definition exports."""

from .preset_def import PresetDef

__all__ = ["PresetDef"]
