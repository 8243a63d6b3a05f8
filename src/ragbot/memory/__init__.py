from ragbot.memory.config import MemoryConfig, RedisConfig, SessionBackend, parse_memory_config
from ragbot.memory.history import format_history
from ragbot.memory.service import ConversationMemory, create_session_store
from ragbot.memory.store import AbstractSessionStore
from ragbot.memory.types import ConversationTurn, Session, TurnRole

__all__ = [
    "AbstractSessionStore",
    "ConversationMemory",
    "ConversationTurn",
    "MemoryConfig",
    "RedisConfig",
    "Session",
    "SessionBackend",
    "TurnRole",
    "create_session_store",
    "format_history",
    "parse_memory_config",
]
