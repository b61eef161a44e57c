"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from spawnwatch.core.types import SORT_POLICIES, TERMINAL_POLICIES
from spawnwatch.services.ticker import DEFAULT_TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

_DEFAULT_SORT_POLICY = "banded"
_DEFAULT_TERMINAL_POLICY = "prune"
_DEFAULT_SHARE_BASE_URL = "https://spawnwatch.local/"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    override = os.environ.get("SPAWNWATCH_HOME")
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Spawnwatch"
        return Path.home() / "Spawnwatch"
    return Path.home() / ".config" / "spawnwatch"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_snapshot_path() -> Path:
    """Return the per-user snapshot file."""
    return get_user_data_dir() / "snapshot.json"


def default_config() -> Dict[str, Any]:
    return {
        "sort_policy": _DEFAULT_SORT_POLICY,
        "terminal_policy": _DEFAULT_TERMINAL_POLICY,
        "tick_interval_seconds": DEFAULT_TICK_INTERVAL_SECONDS,
        "share_base_url": _DEFAULT_SHARE_BASE_URL,
    }


def normalize_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Replace unknown or malformed values with defaults."""
    config = default_config()
    if raw.get("sort_policy") in SORT_POLICIES:
        config["sort_policy"] = raw["sort_policy"]
    if raw.get("terminal_policy") in TERMINAL_POLICIES:
        config["terminal_policy"] = raw["terminal_policy"]
    interval = raw.get("tick_interval_seconds")
    if isinstance(interval, (int, float)) and not isinstance(interval, bool) and interval > 0:
        config["tick_interval_seconds"] = float(interval)
    share_base_url = raw.get("share_base_url")
    if isinstance(share_base_url, str) and share_base_url.strip():
        config["share_base_url"] = share_base_url.strip()
    return config


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return normalize_config(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = normalize_config(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
