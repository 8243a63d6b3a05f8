import json
from typing import Any

import redis
import structlog

from ragbot.errors import SessionStoreError
from ragbot.memory.config import RedisConfig
from ragbot.memory.store import AbstractSessionStore
from ragbot.memory.types import ConversationTurn

_logger = structlog.get_logger()


class RedisSessionStore(AbstractSessionStore):
    """Histories as JSON lists under ``{key_prefix}{session_id}``.

    Every save refreshes the key's TTL.
    """

    def __init__(
        self,
        config: RedisConfig,
        default_ttl: int = 3600,
        client: Any | None = None,
    ) -> None:
        self._config = config
        self._default_ttl = default_ttl
        if client is None:
            client = redis.Redis.from_url(config.url, decode_responses=True)
        self._client = client

    def _key(self, session_id: str) -> str:
        return f"{self._config.key_prefix}{session_id}"

    def load(self, session_id: str) -> list[ConversationTurn]:
        try:
            raw = self._client.get(self._key(session_id))
        except redis.RedisError as e:
            raise SessionStoreError(f"Cannot load session {session_id}: {e}") from e

        if raw is None:
            return []

        try:
            return [ConversationTurn.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            # Corrupt entry: start over rather than failing every request
            _logger.warning("session_payload_invalid", session_id=session_id, error=str(e))
            return []

    def save(
        self,
        session_id: str,
        history: list[ConversationTurn],
        ttl: int | None = None,
    ) -> None:
        payload = json.dumps([turn.to_dict() for turn in history])
        try:
            self._client.set(self._key(session_id), payload, ex=ttl or self._default_ttl)
        except redis.RedisError as e:
            raise SessionStoreError(f"Cannot save session {session_id}: {e}") from e