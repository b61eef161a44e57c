"""Compact, URL-safe encoding of the channel list for sharing."""
from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import List, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from spawnwatch.domain.entity import TrackedEntity
from spawnwatch.services.errors import SaveLoadError, ShareDecodeError
from spawnwatch.services.save_service import SaveService

logger = logging.getLogger(__name__)

SHARE_QUERY_PARAM = "data"


class ShareService:
    """Encodes channels as JSON wrapped in unpadded URL-safe base64."""

    def __init__(self, save_service: SaveService | None = None) -> None:
        self._save_service = save_service or SaveService()

    def encode(self, channels: Sequence[TrackedEntity]) -> str:
        payload = self._save_service.serialize_channels(channels)
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=True).encode("ascii")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def decode(self, token: str) -> List[TrackedEntity]:
        """Return the shared channels or raise ShareDecodeError."""
        if not isinstance(token, str) or not token.strip():
            raise ShareDecodeError("Share token is empty.")
        cleaned = token.strip()
        padded = cleaned + "=" * (-len(cleaned) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError, RecursionError) as exc:
            logger.warning("rejected share token: %s", exc)
            raise ShareDecodeError("Share token is not valid encoded JSON.") from exc
        try:
            return self._save_service.deserialize_channels(payload, "share")
        except ShareDecodeError:
            raise
        except SaveLoadError as exc:
            logger.warning("rejected share token: %s", exc)
            raise ShareDecodeError(str(exc)) from exc

    def build_share_url(self, base_url: str, channels: Sequence[TrackedEntity]) -> str:
        """Attach the encoded channels to base_url as a query parameter."""
        parts = urlsplit(base_url)
        query = parse_qs(parts.query, keep_blank_values=True)
        query[SHARE_QUERY_PARAM] = [self.encode(channels)]
        return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))

    @staticmethod
    def extract_token(url_or_token: str) -> str:
        """Accept a full share URL or a bare token and return the token."""
        text = (url_or_token or "").strip()
        if "?" not in text and "://" not in text:
            return text
        values = parse_qs(urlsplit(text).query).get(SHARE_QUERY_PARAM)
        if not values or not values[0]:
            raise ShareDecodeError(f"URL has no '{SHARE_QUERY_PARAM}' parameter.")
        return values[0]
