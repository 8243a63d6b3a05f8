from pathlib import Path
from typing import Any

import pytest

from ragbot.config import load_config, load_logging_settings, parse_config
from ragbot.embedding.config import (
    BedrockEmbeddingConfig,
    OpenAIEmbeddingConfig,
    VertexEmbeddingConfig,
    parse_embedding_config,
)
from ragbot.errors import ConfigError
from ragbot.knowledge.config import ChunkingProfile, parse_knowledge_config
from ragbot.memory.config import SessionBackend, parse_memory_config
from ragbot.vectorstore.config import (
    ChromaConfig,
    PgVectorConfig,
    PineconeConfig,
    SupabaseConfig,
    parse_vector_store_config,
)

_CONFIG_DIR = Path(__file__).parent.parent / "config"


def _raw(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "embedding": {
            "provider": "openai",
            "model": "text-embedding-3-small",
            "openai": {"api_key": "sk-test"},
        },
        "vector_store": {
            "provider": "pgvector",
            "pgvector": {"database_url": "postgresql+psycopg://u:p@localhost/db"},
        },
        "llm": {"provider": "openai"},
    }
    raw.update(overrides)
    return raw


class TestParseConfig:
    def test_minimal_config_uses_defaults(self) -> None:
        config = parse_config(_raw())

        assert isinstance(config.embedding, OpenAIEmbeddingConfig)
        assert isinstance(config.vector_store, PgVectorConfig)
        assert config.llm_provider == "openai"
        assert config.retrieval.top_k == 3
        assert config.server.port == 3000
        assert config.memory.backend is SessionBackend.MEMORY
        assert config.knowledge.path == "data/knowledge.txt"
        assert config.knowledge.chunking.chunk_size == 500
        assert config.knowledge.chunking.chunk_overlap == 50

    def test_missing_embedding_section(self) -> None:
        raw = _raw()
        del raw["embedding"]
        with pytest.raises(ConfigError, match="embedding"):
            parse_config(raw)

    def test_missing_vector_store_section(self) -> None:
        raw = _raw()
        del raw["vector_store"]
        with pytest.raises(ConfigError, match="vector_store"):
            parse_config(raw)

    def test_missing_llm_provider(self) -> None:
        with pytest.raises(ConfigError, match="llm.provider"):
            parse_config(_raw(llm={}))

    def test_top_k_must_be_positive(self) -> None:
        with pytest.raises(ConfigError, match="top_k"):
            parse_config(_raw(retrieval={"top_k": 0}))

    def test_server_port_from_string(self) -> None:
        config = parse_config(_raw(server={"port": "8080"}))
        assert config.server.port == 8080


class TestParseEmbeddingConfig:
    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigError, match="Unknown embedding provider"):
            parse_embedding_config({"provider": "nope", "model": "m"})

    def test_model_required(self) -> None:
        with pytest.raises(ConfigError, match="embedding.model"):
            parse_embedding_config({"provider": "openai", "openai": {"api_key": "k"}})

    def test_openai_requires_api_key(self) -> None:
        with pytest.raises(ConfigError, match="api_key"):
            parse_embedding_config({"provider": "openai", "model": "m", "openai": {"api_key": ""}})

    def test_openai_empty_api_url_is_none(self) -> None:
        config = parse_embedding_config(
            {"provider": "openai", "model": "m", "openai": {"api_key": "k", "api_url": ""}}
        )
        assert isinstance(config, OpenAIEmbeddingConfig)
        assert config.api_url is None

    def test_bedrock(self) -> None:
        config = parse_embedding_config(
            {
                "provider": "bedrock",
                "model": "amazon.titan-embed-text-v2:0",
                "bedrock": {"region": "eu-west-1"},
            }
        )
        assert isinstance(config, BedrockEmbeddingConfig)
        assert config.region == "eu-west-1"

    def test_vertex(self) -> None:
        config = parse_embedding_config(
            {
                "provider": "vertex",
                "model": "text-embedding-005",
                "vertex": {"project_id": "proj", "location": "us-central1"},
            }
        )
        assert isinstance(config, VertexEmbeddingConfig)
        assert config.project_id == "proj"


class TestParseVectorStoreConfig:
    def test_invalid_store_lists_choices(self) -> None:
        with pytest.raises(ConfigError, match="pgvector, supabase, pinecone, chroma"):
            parse_vector_store_config({"provider": "weaviate"})

    def test_pgvector_requires_url(self) -> None:
        with pytest.raises(ConfigError, match="database_url"):
            parse_vector_store_config({"provider": "pgvector", "pgvector": {}})

    def test_supabase_defaults(self) -> None:
        config = parse_vector_store_config(
            {"provider": "supabase", "supabase": {"url": "https://x.supabase.co", "api_key": "k"}}
        )
        assert isinstance(config, SupabaseConfig)
        assert config.table == "documents"
        assert config.query_name == "match_documents"

    def test_pinecone(self) -> None:
        config = parse_vector_store_config(
            {
                "provider": "pinecone",
                "pinecone": {"api_key": "k", "index": "kb", "upsert_batch_size": "50"},
            }
        )
        assert isinstance(config, PineconeConfig)
        assert config.index == "kb"
        assert config.namespace == ""
        assert config.upsert_batch_size == 50

    def test_pinecone_requires_index(self) -> None:
        with pytest.raises(ConfigError, match="index"):
            parse_vector_store_config({"provider": "pinecone", "pinecone": {"api_key": "k"}})

    def test_chroma_needs_no_settings(self) -> None:
        config = parse_vector_store_config({"provider": "chroma"})
        assert isinstance(config, ChromaConfig)
        assert config.collection == "knowledge"


class TestParseKnowledgeConfig:
    def test_code_profile_defaults(self) -> None:
        config = parse_knowledge_config({"profile": "code", "path": "src"})

        assert config.chunking.profile is ChunkingProfile.CODE
        assert config.chunking.chunk_size == 2000
        assert config.chunking.chunk_overlap == 200
        assert config.suffixes == (".js", ".html")

    def test_explicit_sizes_override_profile(self) -> None:
        config = parse_knowledge_config({"chunk_size": 300, "chunk_overlap": 30})

        assert config.chunking.chunk_size == 300
        assert config.chunking.chunk_overlap == 30

    def test_unknown_profile(self) -> None:
        with pytest.raises(ConfigError, match="profile"):
            parse_knowledge_config({"profile": "poetry"})


class TestParseMemoryConfig:
    def test_defaults(self) -> None:
        config = parse_memory_config({})

        assert config.backend is SessionBackend.MEMORY
        assert config.ttl_seconds == 3600
        assert config.max_turns == 20
        assert config.redis.key_prefix == "ragbot:session:"

    def test_redis_backend(self) -> None:
        config = parse_memory_config({"backend": "redis", "redis": {"url": "redis://cache:6379/1"}})

        assert config.backend is SessionBackend.REDIS
        assert config.redis.url == "redis://cache:6379/1"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigError, match="session backend"):
            parse_memory_config({"backend": "memcached"})

    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(ConfigError, match="ttl_seconds"):
            parse_memory_config({"ttl_seconds": 0})

    def test_negative_limits_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_memory_config({"max_turns": -1})


class TestShippedConfig:
    def test_loads_with_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in (
            "EMBEDDING_PROVIDER",
            "VECTOR_DB",
            "AI_MODEL",
            "SESSION_STORE",
            "DATABASE_URL",
            "PORT",
            "KNOWLEDGE_PATH",
        ):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        config = load_config(_CONFIG_DIR / "ragbot.yaml")

        assert isinstance(config.vector_store, PgVectorConfig)
        assert config.llm_provider == "openai"
        assert config.server.port == 3000
        assert config.retrieval.top_k == 3

    def test_vector_db_env_selects_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("VECTOR_DB", "chroma")

        config = load_config(_CONFIG_DIR / "ragbot.yaml")

        assert isinstance(config.vector_store, ChromaConfig)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Missing or empty"):
            load_config(tmp_path / "ragbot.yaml")


class TestLoadLoggingSettings:
    def test_reads_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "observability.yaml"
        path.write_text("logging:\n  json_output: false\n  log_level: DEBUG\n", encoding="utf-8")

        assert load_logging_settings(path) == (False, "DEBUG")

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        assert load_logging_settings(tmp_path / "missing.yaml") == (True, "INFO")
