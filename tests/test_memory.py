from unittest.mock import patch

import fakeredis

from ragbot.memory.adapters.in_memory import InMemorySessionStore
from ragbot.memory.adapters.redis import RedisSessionStore
from ragbot.memory.config import MemoryConfig, RedisConfig, SessionBackend
from ragbot.memory.history import format_history
from ragbot.memory.service import ConversationMemory, create_session_store
from ragbot.memory.types import ConversationTurn, Session, TurnRole


def _turns(count: int) -> list[ConversationTurn]:
    return [
        ConversationTurn(
            role=TurnRole.USER if i % 2 == 0 else TurnRole.ASSISTANT,
            content=f"message {i}",
        )
        for i in range(count)
    ]


def _word_count(text: str) -> int:
    return len(text.split())


class TestFormatHistory:
    def test_empty_history(self) -> None:
        assert format_history([]) == ""

    def test_role_prefixed_lines(self) -> None:
        assert format_history(_turns(2)) == "user: message 0\nassistant: message 1"

    def test_max_turns_keeps_newest(self) -> None:
        assert format_history(_turns(5), max_turns=2) == "assistant: message 3\nuser: message 4"

    def test_token_budget_drops_oldest(self) -> None:
        # each line is 3 words + 1 for the newline
        with patch("ragbot.memory.history.count_tokens", side_effect=_word_count):
            rendered = format_history(_turns(5), max_tokens=9)

        assert rendered.splitlines() == ["assistant: message 3", "user: message 4"]

    def test_zero_caps_keep_everything(self) -> None:
        assert len(format_history(_turns(30)).splitlines()) == 30


class TestConversationMemory:
    def test_begin_without_id_creates_fresh_session(self) -> None:
        store = InMemorySessionStore()
        store.save("existing", _turns(2))
        memory = ConversationMemory(store, MemoryConfig())

        session = memory.begin(None)

        assert session.id
        assert session.id != "existing"
        assert session.history == []

    def test_new_session_ids_are_unique(self) -> None:
        memory = ConversationMemory(InMemorySessionStore(), MemoryConfig())

        assert memory.begin(None).id != memory.begin(None).id

    def test_begin_without_id_uses_supplied_history(self) -> None:
        memory = ConversationMemory(InMemorySessionStore(), MemoryConfig())

        session = memory.begin(None, _turns(2))

        assert session.history == _turns(2)

    def test_stored_history_wins_over_supplied(self) -> None:
        store = InMemorySessionStore()
        store.save("s1", _turns(4))
        memory = ConversationMemory(store, MemoryConfig())

        session = memory.begin("s1", _turns(1))

        assert session.history == _turns(4)

    def test_unknown_id_falls_back_to_supplied(self) -> None:
        memory = ConversationMemory(InMemorySessionStore(), MemoryConfig())

        session = memory.begin("s1", _turns(2))

        assert session.id == "s1"
        assert session.history == _turns(2)

    def test_commit_saves_history(self) -> None:
        store = InMemorySessionStore()
        memory = ConversationMemory(store, MemoryConfig())
        session = Session(id="s1", history=_turns(2))

        memory.commit(session)

        assert store.load("s1") == _turns(2)
        assert session.expires_at is not None

    def test_commit_on_redis_sets_expiry(self) -> None:
        config = MemoryConfig(backend=SessionBackend.REDIS, ttl_seconds=120)
        client = fakeredis.FakeRedis(decode_responses=True)
        store = RedisSessionStore(RedisConfig(), default_ttl=120, client=client)
        memory = ConversationMemory(store, config)
        session = Session(id="s1", history=_turns(2))

        memory.commit(session)

        assert session.expires_at is not None
        assert 0 < client.ttl("ragbot:session:s1") <= 120


class TestCreateSessionStore:
    def test_memory_backend(self) -> None:
        assert isinstance(create_session_store(MemoryConfig()), InMemorySessionStore)

    def test_redis_backend(self) -> None:
        config = MemoryConfig(backend=SessionBackend.REDIS)
        with patch("ragbot.memory.adapters.redis.redis.Redis.from_url") as mock_from_url:
            store = create_session_store(config)

        assert isinstance(store, RedisSessionStore)
        mock_from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
