"""Repository for respawn window presets."""
from __future__ import annotations

from typing import Dict

from spawnwatch.data.errors import DataValidationError
from spawnwatch.data.repositories.base import RepositoryBase
from spawnwatch.domain.defs import PresetDef
from spawnwatch.domain.window import CUSTOM_PRESET_ID


class PresetsRepository(RepositoryBase[PresetDef]):
    """Loads and validates preset definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("presets.json", base_path)

    def has(self, preset_id: str) -> bool:
        self._ensure_loaded()
        assert self._definitions is not None
        return preset_id in self._definitions

    def _build(self, raw: dict[str, object]) -> Dict[str, PresetDef]:
        presets_raw = self._require_mapping(raw, "presets.json")
        definitions: Dict[str, PresetDef] = {}
        for preset_id, payload in presets_raw.items():
            if not isinstance(preset_id, str) or not preset_id.strip():
                raise DataValidationError("preset id must be a non-empty string.")
            if preset_id == CUSTOM_PRESET_ID:
                raise DataValidationError(f"preset id '{CUSTOM_PRESET_ID}' is reserved.")
            mapping = self._require_mapping(payload, f"preset '{preset_id}'")
            if "id" in mapping:
                embedded_id = self._require_str(mapping.get("id"), f"preset '{preset_id}' id")
                if embedded_id != preset_id:
                    raise DataValidationError(
                        f"preset '{preset_id}' id must match its key ('{embedded_id}' found)."
                    )
            name = self._require_str(mapping.get("name"), f"preset '{preset_id}' name").strip()
            if not name:
                raise DataValidationError(f"preset '{preset_id}' name must not be empty.")
            min_minutes = self._require_positive_int(
                mapping.get("min_respawn_minutes"), f"preset '{preset_id}' min_respawn_minutes"
            )
            max_minutes = self._require_positive_int(
                mapping.get("max_respawn_minutes"), f"preset '{preset_id}' max_respawn_minutes"
            )
            if max_minutes <= min_minutes:
                raise DataValidationError(
                    f"preset '{preset_id}' max_respawn_minutes must exceed min_respawn_minutes."
                )
            grace = mapping.get("expired_grace_minutes")
            if grace is not None:
                grace = self._require_positive_int(
                    grace, f"preset '{preset_id}' expired_grace_minutes"
                )

            notes = mapping.get("notes")
            if notes is not None:
                notes = self._require_str(notes, f"preset '{preset_id}' notes")

            definitions[preset_id] = PresetDef(
                id=preset_id,
                name=name,
                min_respawn_minutes=min_minutes,
                max_respawn_minutes=max_minutes,
                expired_grace_minutes=grace,
                notes=notes,
            )
        return definitions
