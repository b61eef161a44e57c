"""Console-driven UI loop for spawnwatch."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

from spawnwatch.core.types import SORT_POLICIES, TERMINAL_POLICIES
from spawnwatch.data.errors import DataError
from spawnwatch.data.repositories import PresetsRepository
from spawnwatch.domain.defs import PresetDef
from spawnwatch.domain.window import CUSTOM_PRESET_ID
from spawnwatch.presentation.cli import config as cli_config
from spawnwatch.presentation.cli.render import (
    render_board,
    render_bullet_lines,
    render_heading,
    render_menu,
)
from spawnwatch.presentation.cli.store import SnapshotStore
from spawnwatch.services import (
    ActionFailedEvent,
    ChannelAddedEvent,
    ChannelsKilledEvent,
    ChannelsRemovedEvent,
    PresetAppliedEvent,
    RespawnTracker,
    SaveLoadError,
    SaveService,
    SettingsUpdatedEvent,
    ShareService,
    Ticker,
    TrackerEvent,
)
from spawnwatch.services.errors import PresetError

logger = logging.getLogger(__name__)

_MENU_QUIT = "quit"


@dataclass
class CliSession:
    """Collaborators shared by every menu action."""

    tracker: RespawnTracker
    store: SnapshotStore
    save_service: SaveService
    share_service: ShareService
    presets_repo: PresetsRepository
    options: Dict[str, Any] = field(default_factory=cli_config.default_config)
    config_path: Path | None = None


MenuEntry = Tuple[str, Callable[[CliSession], str | None]]


def main(session: CliSession | None = None) -> None:
    """Start the interactive CLI session."""
    session = session or build_session()
    print("=== Spawnwatch: channel respawn tracker ===")
    while True:
        _show_board(session)
        entries = _main_menu_entries(session)
        render_menu("Menu", [label for label, _ in entries])
        index = _prompt_index(len(entries))
        _, action = entries[index]
        if action(session) == _MENU_QUIT:
            break
    print("Goodbye!")


def build_session(
    options: Dict[str, Any] | None = None,
    store: SnapshotStore | None = None,
    config_path: Path | None = None,
) -> CliSession:
    """Wire the tracker to its collaborators and restore the last snapshot."""
    options = options or cli_config.load_config(config_path)
    presets_repo = PresetsRepository()
    save_service = SaveService()
    tracker = RespawnTracker(
        presets_repo=presets_repo,
        sort_policy=options["sort_policy"],
        terminal_policy=options["terminal_policy"],
    )
    session = CliSession(
        tracker=tracker,
        store=store or SnapshotStore(),
        save_service=save_service,
        share_service=ShareService(save_service),
        presets_repo=presets_repo,
        options=options,
        config_path=config_path,
    )
    _restore_snapshot(session)
    return session


def _restore_snapshot(session: CliSession) -> None:
    if not session.store.exists():
        return
    try:
        state = session.save_service.deserialize(session.store.read())
    except SaveLoadError as exc:
        logger.warning("snapshot ignored: %s", exc)
        print(f"Saved data could not be loaded ({exc}). Starting empty.")
        return
    session.tracker.load_state(state)
    logger.info("restored %d channels from %s", len(state.channels), session.store.path)


def _persist(session: CliSession) -> None:
    session.store.write(session.save_service.serialize(session.tracker.state))


def _main_menu_entries(session: CliSession) -> List[MenuEntry]:
    entries: List[MenuEntry] = [
        ("Set Respawn Window", _action_set_window),
        ("Choose Preset", _action_choose_preset),
    ]
    if session.tracker.is_ready():
        entries.append(("Add Channel", _action_add_channel))
    if session.tracker.channel_ids():
        entries.append(("Select / Deselect Channel", _action_toggle))
    if session.tracker.has_selection():
        entries.append(("Record Kill on Selected", _action_kill))
        entries.append(("Remove Selected", _action_remove))
    entries.extend(
        [
            ("Watch (live)", _action_watch),
            ("Export Share Link", _action_export),
            ("Import Share Link", _action_import),
            ("Options", _action_options),
            ("Clear All", _action_clear),
            ("Quit", lambda _session: _MENU_QUIT),
        ]
    )
    return entries


def _show_board(session: CliSession) -> None:
    board = session.tracker.evaluate_all()
    render_board(board, ready=session.tracker.is_ready(), settings_line=_settings_line(session))
    if board.pruned_ids:
        _persist(session)


def _settings_line(session: CliSession) -> str:
    settings = session.tracker.settings
    grace = settings.expired_grace_minutes
    grace_text = f", grace {grace} min" if grace is not None else ""
    preset = settings.preset_id or CUSTOM_PRESET_ID
    return (
        f"Window {settings.min_respawn_minutes}-{settings.max_respawn_minutes} min"
        f"{grace_text} [{preset}]"
    )


def _action_set_window(session: CliSession) -> None:
    if session.tracker.settings.is_locked():
        print("A preset is active. Choose the custom preset to edit the window.")
        return
    min_minutes = _prompt_int("Minimum respawn minutes: ")
    max_minutes = _prompt_int("Maximum respawn minutes: ")
    grace: int | None = None
    if session.tracker.terminal_policy == "prune":
        grace = _prompt_int("Expired grace minutes: ")
    _report(session.tracker.update_settings(min_minutes, max_minutes, grace))
    _persist(session)


def _action_choose_preset(session: CliSession) -> None:
    try:
        presets: List[PresetDef] = session.presets_repo.all()
    except DataError as exc:
        logger.warning("presets unavailable: %s", exc)
        print("Presets are unavailable.")
        return
    labels = ["Custom (editable)"] + [
        f"{preset.name} ({preset.min_respawn_minutes}-{preset.max_respawn_minutes} min)"
        for preset in presets
    ]
    render_menu("Presets", labels)
    index = _prompt_index(len(labels))
    preset_id = CUSTOM_PRESET_ID if index == 0 else presets[index - 1].id
    try:
        _report(session.tracker.apply_preset(preset_id))
    except PresetError as exc:
        print(str(exc))
        return
    _persist(session)


def _action_add_channel(session: CliSession) -> None:
    raw = input("Channel number: ")
    event = session.tracker.add_channel(raw)
    _report(event)
    if isinstance(event, ChannelAddedEvent):
        _persist(session)


def _action_toggle(session: CliSession) -> None:
    entity_id = input("Channel to select/deselect: ").strip()
    result = session.tracker.toggle_selection(entity_id)
    if result is None:
        print(f"Channel {entity_id} is not tracked.")
        return
    _persist(session)


def _action_kill(session: CliSession) -> None:
    event = session.tracker.kill_selected()
    if event is None:
        return
    _report(event)
    _persist(session)


def _action_remove(session: CliSession) -> None:
    count = len(session.tracker.state.selected())
    confirmed = _prompt_yes_no(f"Remove {count} selected channel(s)?")
    event = session.tracker.remove_selected(confirmed=confirmed)
    _report(event)
    if isinstance(event, ChannelsRemovedEvent):
        _persist(session)


def _action_clear(session: CliSession) -> None:
    if not _prompt_yes_no("Clear all channels and settings?"):
        return
    session.tracker.clear_all()
    session.store.delete()
    print("All data cleared.")


def _action_watch(session: CliSession, *, max_ticks: int | None = None) -> None:
    print("Watching channels. Press Ctrl+C to return to the menu.")
    ticker = Ticker(
        lambda: _show_board(session),
        interval_seconds=session.options["tick_interval_seconds"],
    )
    try:
        ticker.run(max_ticks=max_ticks)
    except KeyboardInterrupt:
        ticker.stop()
        print()


def _action_options(session: CliSession) -> None:
    options = session.options
    render_menu(
        "Options",
        [
            f"Sort order: {options['sort_policy']}",
            f"Expired channels: {options['terminal_policy']}",
            "Back",
        ],
    )
    index = _prompt_index(3)
    if index == 0:
        options["sort_policy"] = _next_choice(SORT_POLICIES, options["sort_policy"])
    elif index == 1:
        options["terminal_policy"] = _next_choice(TERMINAL_POLICIES, options["terminal_policy"])
    else:
        return
    session.tracker.set_policies(options["sort_policy"], options["terminal_policy"])
    cli_config.save_config(options, session.config_path)
    print(f"Sort order: {options['sort_policy']}, expired channels: {options['terminal_policy']}.")


def _action_export(session: CliSession) -> None:
    url = session.share_service.build_share_url(
        session.options["share_base_url"], session.tracker.state.channels
    )
    render_heading("Share Link")
    print(url)


def _action_import(session: CliSession) -> None:
    raw = input("Paste share link or token: ")
    try:
        token = session.share_service.extract_token(raw)
        channels = session.share_service.decode(token)
    except SaveLoadError as exc:
        print(f"Could not import: {exc}")
        return
    session.tracker.replace_channels(channels)
    print(f"Imported {len(channels)} channel(s).")
    _persist(session)


def _report(event: TrackerEvent) -> None:
    if isinstance(event, ChannelAddedEvent):
        lines = [f"Channel {event.entity_id} added."]
    elif isinstance(event, ChannelsKilledEvent):
        lines = [f"Kill recorded on {', '.join(event.entity_ids)}."]
    elif isinstance(event, ChannelsRemovedEvent):
        lines = [f"Removed {', '.join(event.entity_ids)}."]
    elif isinstance(event, SettingsUpdatedEvent):
        lines = ["Respawn window updated."]
    elif isinstance(event, PresetAppliedEvent):
        lines = [f"Preset '{event.name}' selected."]
    elif isinstance(event, ActionFailedEvent):
        lines = [event.message]
    else:
        lines = [str(event)]
    render_bullet_lines(lines)


def _next_choice(choices: Tuple[str, ...], current: str) -> str:
    if current not in choices:
        return choices[0]
    return choices[(choices.index(current) + 1) % len(choices)]


def _prompt_index(option_count: int) -> int:
    while True:
        raw = input("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < option_count:
            return index
        print(f"Please enter a value between 1 and {option_count}.")


def _prompt_int(prompt: str) -> int:
    while True:
        raw = input(prompt).strip()
        try:
            return int(raw)
        except ValueError:
            print("Please enter a whole number.")


def _prompt_yes_no(prompt: str) -> bool:
    return input(f"{prompt} [y/N]: ").strip().lower() in ("y", "yes")
