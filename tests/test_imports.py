def test_import_spawnwatch_package() -> None:
    import importlib

    module = importlib.import_module("spawnwatch")
    assert module is not None


def test_import_cli_entrypoint_no_side_effects() -> None:
    from spawnwatch.main import parse_args

    args = parse_args(["--log-level", "debug"])
    assert args.log_level == "debug"


def test_log_level_is_case_insensitive() -> None:
    from spawnwatch.main import parse_args

    assert parse_args(["--log-level", "INFO"]).log_level == "info"
    assert parse_args([]).log_level == "warning"


def test_unknown_log_level_exits_with_usage_error(capsys) -> None:
    import pytest

    from spawnwatch.main import parse_args

    with pytest.raises(SystemExit) as info:
        parse_args(["--log-level", "loud"])
    assert info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
