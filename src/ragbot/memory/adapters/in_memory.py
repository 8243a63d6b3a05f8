import threading
import time

from ragbot.memory.store import AbstractSessionStore
from ragbot.memory.types import ConversationTurn


class InMemorySessionStore(AbstractSessionStore):
    """Process-local histories, lost on restart.

    A session saved with a ``ttl`` expires that many seconds after its last
    write. Expired sessions are dropped on every save, so a long-running
    server holds at most the sessions active within one TTL window.
    """

    def __init__(self) -> None:
        # session id -> (monotonic deadline or None, history)
        self._sessions: dict[str, tuple[float | None, list[ConversationTurn]]] = {}
        self._lock = threading.Lock()

    def load(self, session_id: str) -> list[ConversationTurn]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return []
            deadline, history = entry
            if deadline is not None and deadline <= time.monotonic():
                del self._sessions[session_id]
                return []
            return list(history)

    def save(
        self,
        session_id: str,
        history: list[ConversationTurn],
        ttl: int | None = None,
    ) -> None:
        now = time.monotonic()
        deadline = now + ttl if ttl else None
        with self._lock:
            self._evict_expired(now)
            self._sessions[session_id] = (deadline, list(history))

    def _evict_expired(self, now: float) -> None:
        expired = [
            session_id
            for session_id, (deadline, _) in self._sessions.items()
            if deadline is not None and deadline <= now
        ]
        for session_id in expired:
            del self._sessions[session_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
