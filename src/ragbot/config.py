from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ragbot.embedding.config import AbstractEmbeddingConfig, parse_embedding_config
from ragbot.errors import ConfigError
from ragbot.knowledge.config import KnowledgeConfig, parse_knowledge_config
from ragbot.memory.config import MemoryConfig, parse_memory_config
from ragbot.util import PROJECT_ROOT, load_yaml_config
from ragbot.vectorstore.config import AbstractVectorStoreConfig, parse_vector_store_config

DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "ragbot.yaml"
OBSERVABILITY_CONFIG_PATH = PROJECT_ROOT / "config" / "observability.yaml"


@dataclass
class RetrievalConfig:
    top_k: int = 3


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class RagbotConfig:
    embedding: AbstractEmbeddingConfig
    vector_store: AbstractVectorStoreConfig
    llm_provider: str
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> RagbotConfig:
    raw = load_yaml_config(path)
    if not raw:
        raise ConfigError(f"Missing or empty config file: {path}")
    return parse_config(raw)


def parse_config(raw: dict[str, Any]) -> RagbotConfig:
    if "embedding" not in raw:
        raise ConfigError("Missing 'embedding' section in config")
    if "vector_store" not in raw:
        raise ConfigError("Missing 'vector_store' section in config")

    llm_provider = (raw.get("llm") or {}).get("provider", "")
    if not llm_provider:
        raise ConfigError("Missing 'llm.provider' in config")

    retrieval_raw = raw.get("retrieval") or {}
    top_k = int(retrieval_raw.get("top_k", 3))
    if top_k < 1:
        raise ConfigError(f"retrieval.top_k must be positive, got {top_k}")

    server_raw = raw.get("server") or {}

    return RagbotConfig(
        embedding=parse_embedding_config(raw["embedding"]),
        vector_store=parse_vector_store_config(raw["vector_store"]),
        llm_provider=str(llm_provider),
        knowledge=parse_knowledge_config(raw.get("knowledge") or {}),
        retrieval=RetrievalConfig(top_k=top_k),
        memory=parse_memory_config(raw.get("memory") or {}),
        server=ServerConfig(
            host=server_raw.get("host", "0.0.0.0"),
            port=int(server_raw.get("port", 3000)),
        ),
    )


def load_logging_settings(path: Path = OBSERVABILITY_CONFIG_PATH) -> tuple[bool, str]:
    """Return ``(json_output, log_level)`` from the observability config."""
    logging_config = load_yaml_config(path).get("logging") or {}
    json_output = logging_config.get("json_output", True)
    log_level = logging_config.get("log_level", "INFO")
    return bool(json_output), str(log_level)
