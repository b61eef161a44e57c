from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import pytest

from spawnwatch.domain.entity import TrackedEntity
from spawnwatch.domain.window import RespawnWindow
from spawnwatch.services.errors import SaveLoadError, ShareDecodeError
from spawnwatch.services.share_service import ShareService

KILLED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _channels() -> list[TrackedEntity]:
    return [
        TrackedEntity(id="1", kill_timestamp=KILLED_AT, window=RespawnWindow(45, 68, 10)),
        TrackedEntity(
            id="204",
            kill_timestamp=KILLED_AT + timedelta(minutes=7),
            window=RespawnWindow(20, 30, None),
            selected=True,
        ),
        TrackedEntity(id="9999", kill_timestamp=KILLED_AT - timedelta(hours=1), window=RespawnWindow(1, 2, 1)),
    ]


@pytest.mark.parametrize("count", [0, 1, 3])
def test_share_round_trip(count: int) -> None:
    service = ShareService()
    channels = _channels()[:count]

    decoded = service.decode(service.encode(channels))

    assert [c.id for c in decoded] == [c.id for c in channels]
    assert [c.kill_timestamp for c in decoded] == [c.kill_timestamp for c in channels]
    assert [c.window for c in decoded] == [c.window for c in channels]


def test_token_is_url_safe_without_padding() -> None:
    token = ShareService().encode(_channels())
    assert "=" not in token
    assert "+" not in token and "/" not in token


def test_decode_rejects_garbage() -> None:
    with pytest.raises(ShareDecodeError):
        ShareService().decode("!!!not-a-token!!!")


def test_decode_rejects_deeply_nested_json() -> None:
    token = base64.urlsafe_b64encode(b"[" * 200000).decode("ascii").rstrip("=")
    with pytest.raises(ShareDecodeError):
        ShareService().decode(token)


def test_decode_rejects_empty_token() -> None:
    with pytest.raises(ShareDecodeError):
        ShareService().decode("   ")


def test_decode_rejects_wrong_json_shape() -> None:
    token = base64.urlsafe_b64encode(json.dumps({"id": "1"}).encode()).decode().rstrip("=")
    with pytest.raises(ShareDecodeError) as info:
        ShareService().decode(token)
    assert isinstance(info.value, SaveLoadError)


def test_share_url_round_trip_keeps_existing_query() -> None:
    service = ShareService()
    url = service.build_share_url("https://example.test/tracker?lang=en", _channels())

    query = parse_qs(urlsplit(url).query)
    assert query["lang"] == ["en"]

    token = service.extract_token(url)
    assert [c.id for c in service.decode(token)] == ["1", "204", "9999"]


def test_extract_token_accepts_bare_token() -> None:
    assert ShareService.extract_token("  W10  ") == "W10"


def test_extract_token_requires_data_parameter() -> None:
    with pytest.raises(ShareDecodeError):
        ShareService.extract_token("https://example.test/tracker?lang=en")
