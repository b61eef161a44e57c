"""File-system storage for the single tracker snapshot."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from spawnwatch.presentation.cli import config
from spawnwatch.services.errors import SaveLoadError

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and atomically replaces one JSON snapshot file."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else config.get_snapshot_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> Dict[str, Any]:
        """Load and parse the stored payload."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SaveLoadError(f"Snapshot is not valid UTF-8: {self._path}") from exc
        except OSError as exc:
            raise SaveLoadError(f"Unable to read snapshot: {self._path}") from exc
        try:
            payload = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise SaveLoadError(f"Snapshot is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise SaveLoadError("Snapshot must be a JSON object.")
        return payload

    def write(self, payload: Dict[str, Any]) -> None:
        """Write to a sibling temp file, then swap it into place."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("snapshot written to %s", self._path)

    def delete(self) -> None:
        """Delete the snapshot if it exists."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
