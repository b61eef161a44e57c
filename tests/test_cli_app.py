from __future__ import annotations

import base64
from pathlib import Path
from typing import Iterable

from spawnwatch.presentation.cli import app, config
from spawnwatch.presentation.cli.store import SnapshotStore
from spawnwatch.services.save_service import SaveService


def _session(tmp_path: Path, **option_overrides) -> app.CliSession:
    options = config.default_config()
    options.update(option_overrides)
    return app.build_session(
        options=options,
        store=SnapshotStore(tmp_path / "snapshot.json"),
        config_path=tmp_path / "config.json",
    )


def _feed_input(monkeypatch, answers: Iterable[str]) -> None:
    queue = list(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": queue.pop(0))


def _labels(session: app.CliSession) -> list[str]:
    return [label for label, _ in app._main_menu_entries(session)]


def test_menu_hides_add_until_window_ready(tmp_path: Path) -> None:
    session = _session(tmp_path)
    labels = _labels(session)
    assert "Add Channel" not in labels
    assert "Record Kill on Selected" not in labels
    assert labels[-1] == "Quit"


def test_set_window_then_add_channel_persists(monkeypatch, tmp_path: Path) -> None:
    session = _session(tmp_path)
    _feed_input(monkeypatch, ["45", "68", "10"])
    app._action_set_window(session)
    assert "Add Channel" in _labels(session)

    _feed_input(monkeypatch, ["12"])
    app._action_add_channel(session)

    restored = SaveService().deserialize(session.store.read())
    assert [channel.id for channel in restored.channels] == ["12"]
    assert restored.settings.max_respawn_minutes == 68


def test_selection_enables_kill_and_remove(monkeypatch, tmp_path: Path) -> None:
    session = _session(tmp_path)
    session.tracker.update_settings(45, 68, 10)
    session.tracker.add_channel("5")
    _feed_input(monkeypatch, ["5"])
    app._action_toggle(session)

    labels = _labels(session)
    assert "Record Kill on Selected" in labels
    assert "Remove Selected" in labels

    _feed_input(monkeypatch, ["n"])
    app._action_remove(session)
    assert session.tracker.channel_ids() == ["5"]

    _feed_input(monkeypatch, ["y"])
    app._action_remove(session)
    assert session.tracker.channel_ids() == []


def test_build_session_restores_snapshot(tmp_path: Path) -> None:
    first = _session(tmp_path)
    first.tracker.update_settings(20, 30, 5)
    first.tracker.add_channel("77")
    app._persist(first)

    second = _session(tmp_path)

    assert second.tracker.channel_ids() == ["77"]
    assert second.tracker.is_ready()


def test_corrupt_snapshot_starts_empty_without_overwriting(tmp_path: Path, capsys) -> None:
    path = tmp_path / "snapshot.json"
    path.write_text('{"save_version": 1, "settings": {}, "channels": "oops"}', encoding="utf-8")

    session = _session(tmp_path)

    assert session.tracker.channel_ids() == []
    assert "could not be loaded" in capsys.readouterr().out
    assert "oops" in path.read_text(encoding="utf-8")


def test_undecodable_snapshot_starts_empty(tmp_path: Path, capsys) -> None:
    path = tmp_path / "snapshot.json"
    path.write_bytes(b'{"save_version": 1, "x": "\xff\xfe"}')

    session = _session(tmp_path)

    assert session.tracker.channel_ids() == []
    assert not session.tracker.is_ready()
    assert "could not be loaded" in capsys.readouterr().out
    assert path.read_bytes().startswith(b'{"save_version"')


def test_deeply_nested_share_token_is_rejected(monkeypatch, tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)
    session.tracker.update_settings(45, 68, 10)
    session.tracker.add_channel("3")
    token = base64.urlsafe_b64encode(b"[" * 200000).decode("ascii").rstrip("=")
    _feed_input(monkeypatch, [token])

    app._action_import(session)

    assert session.tracker.channel_ids() == ["3"]
    assert "Could not import" in capsys.readouterr().out


def test_options_cycle_policy_and_save_config(monkeypatch, tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)
    assert "Options" in _labels(session)

    _feed_input(monkeypatch, ["1"])
    app._action_options(session)
    _feed_input(monkeypatch, ["2"])
    app._action_options(session)

    assert session.tracker.sort_policy == "kill_time"
    assert session.tracker.terminal_policy == "invalid"
    saved = config.load_config(tmp_path / "config.json")
    assert saved["sort_policy"] == "kill_time"
    assert saved["terminal_policy"] == "invalid"

    reopened = app.build_session(
        store=SnapshotStore(tmp_path / "snapshot.json"),
        config_path=tmp_path / "config.json",
    )
    assert reopened.tracker.sort_policy == "kill_time"
    assert reopened.tracker.terminal_policy == "invalid"


def test_options_back_leaves_config_unwritten(monkeypatch, tmp_path: Path) -> None:
    session = _session(tmp_path)
    _feed_input(monkeypatch, ["3"])
    app._action_options(session)
    assert session.tracker.sort_policy == "banded"
    assert not (tmp_path / "config.json").exists()


def test_preset_choice_locks_window(monkeypatch, tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)
    presets = session.presets_repo.all()
    target_index = [preset.id for preset in presets].index("field_boss") + 2
    _feed_input(monkeypatch, [str(target_index)])
    app._action_choose_preset(session)

    assert session.tracker.settings.preset_id == "field_boss"
    assert session.tracker.is_ready()

    app._action_set_window(session)
    assert "preset is active" in capsys.readouterr().out


def test_share_export_then_import(monkeypatch, tmp_path: Path, capsys) -> None:
    source = _session(tmp_path / "a", share_base_url="https://share.test/")
    source.tracker.update_settings(45, 68, 10)
    source.tracker.add_channel("1")
    source.tracker.add_channel("2")
    capsys.readouterr()
    app._action_export(source)
    url = capsys.readouterr().out.strip().splitlines()[-1]
    assert url.startswith("https://share.test/?data=")

    target = _session(tmp_path / "b")
    _feed_input(monkeypatch, [url])
    app._action_import(target)

    assert target.tracker.channel_ids() == ["1", "2"]
    assert target.store.exists()


def test_bad_share_import_leaves_channels(monkeypatch, tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)
    session.tracker.update_settings(45, 68, 10)
    session.tracker.add_channel("3")
    _feed_input(monkeypatch, ["https://share.test/?data=%%%"])
    app._action_import(session)

    assert session.tracker.channel_ids() == ["3"]
    assert "Could not import" in capsys.readouterr().out


def test_watch_renders_each_tick(tmp_path: Path, capsys) -> None:
    session = _session(tmp_path, tick_interval_seconds=0.001)
    session.tracker.update_settings(45, 68, 10)
    session.tracker.add_channel("9")
    capsys.readouterr()

    app._action_watch(session, max_ticks=2)

    output = capsys.readouterr().out
    assert output.count("=== Channels ===") == 2


def test_clear_all_deletes_snapshot(monkeypatch, tmp_path: Path) -> None:
    session = _session(tmp_path)
    session.tracker.update_settings(45, 68, 10)
    session.tracker.add_channel("3")
    app._persist(session)

    _feed_input(monkeypatch, ["y"])
    app._action_clear(session)

    assert session.tracker.channel_ids() == []
    assert not session.tracker.is_ready()
    assert not session.store.exists()


def test_main_quits_from_menu(monkeypatch, tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)
    quit_index = len(app._main_menu_entries(session))
    _feed_input(monkeypatch, [str(quit_index)])
    app.main(session)
    assert "Goodbye!" in capsys.readouterr().out
