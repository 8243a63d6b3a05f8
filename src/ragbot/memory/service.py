import uuid
from datetime import UTC, datetime, timedelta

import structlog

from ragbot.memory.config import MemoryConfig, SessionBackend
from ragbot.memory.store import AbstractSessionStore
from ragbot.memory.types import ConversationTurn, Session

_logger = structlog.get_logger()


class ConversationMemory:
    """Loads a session at the start of a request and writes it back at the end."""

    def __init__(self, store: AbstractSessionStore, config: MemoryConfig) -> None:
        self._store = store
        self._config = config

    @property
    def config(self) -> MemoryConfig:
        return self._config

    def begin(
        self,
        conversation_id: str | None,
        supplied_history: list[ConversationTurn] | None = None,
    ) -> Session:
        """Open the session for one chat request.

        Without a *conversation_id* a fresh session is created, so callers
        never see another session's history. Stored history takes precedence
        over history sent by the caller.
        """
        session_id = conversation_id or uuid.uuid4().hex
        history = self._store.load(session_id) if conversation_id else []
        if not history and supplied_history:
            history = list(supplied_history)

        _logger.debug(
            "session_loaded",
            session_id=session_id,
            turns=len(history),
            new=conversation_id is None,
        )
        return Session(id=session_id, history=history)

    def commit(self, session: Session) -> None:
        self._store.save(session.id, session.history, self._config.ttl_seconds)
        session.expires_at = datetime.now(UTC) + timedelta(seconds=self._config.ttl_seconds)
        _logger.debug("session_saved", session_id=session.id, turns=len(session.history))


def create_session_store(config: MemoryConfig) -> AbstractSessionStore:
    match config.backend:
        case SessionBackend.MEMORY:
            from ragbot.memory.adapters.in_memory import InMemorySessionStore

            return InMemorySessionStore()
        case SessionBackend.REDIS:
            from ragbot.memory.adapters.redis import RedisSessionStore

            return RedisSessionStore(config.redis, default_ttl=config.ttl_seconds)
