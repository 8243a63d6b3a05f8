from abc import ABC, abstractmethod

from ragbot.memory.types import ConversationTurn


class AbstractSessionStore(ABC):
    """Keyed storage of conversation histories.

    Expired or unknown sessions load as an empty history; that is not an error.
    """

    @abstractmethod
    def load(self, session_id: str) -> list[ConversationTurn]: ...

    @abstractmethod
    def save(
        self,
        session_id: str,
        history: list[ConversationTurn],
        ttl: int | None = None,
    ) -> None: ...

    def append(self, session_id: str, turn: ConversationTurn, ttl: int | None = None) -> None:
        history = self.load(session_id)
        history.append(turn)
        self.save(session_id, history, ttl)
