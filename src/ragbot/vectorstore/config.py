from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ragbot.errors import ConfigError


class VectorStoreType(StrEnum):
    PGVECTOR = "pgvector"
    SUPABASE = "supabase"
    PINECONE = "pinecone"
    CHROMA = "chroma"


def _require(raw: dict[str, Any], key: str, section: str) -> str:
    value = str(raw.get(key) or "")
    if not value:
        raise ConfigError(f"Missing 'vector_store.{section}.{key}' in config")
    return value


@dataclass
class AbstractVectorStoreConfig(ABC):
    @classmethod
    @abstractmethod
    def from_yaml(cls, raw: dict[str, Any]) -> "AbstractVectorStoreConfig": ...


@dataclass
class PgVectorConfig(AbstractVectorStoreConfig):
    database_url: str

    @classmethod
    def from_yaml(cls, raw: dict[str, Any]) -> "PgVectorConfig":
        return cls(database_url=_require(raw, "database_url", "pgvector"))


@dataclass
class SupabaseConfig(AbstractVectorStoreConfig):
    url: str
    api_key: str
    table: str = "documents"
    query_name: str = "match_documents"

    @classmethod
    def from_yaml(cls, raw: dict[str, Any]) -> "SupabaseConfig":
        return cls(
            url=_require(raw, "url", "supabase"),
            api_key=_require(raw, "api_key", "supabase"),
            table=raw.get("table") or "documents",
            query_name=raw.get("query_name") or "match_documents",
        )


@dataclass
class PineconeConfig(AbstractVectorStoreConfig):
    api_key: str
    index: str
    namespace: str = ""
    upsert_batch_size: int = 100

    @classmethod
    def from_yaml(cls, raw: dict[str, Any]) -> "PineconeConfig":
        return cls(
            api_key=_require(raw, "api_key", "pinecone"),
            index=_require(raw, "index", "pinecone"),
            namespace=raw.get("namespace") or "",
            upsert_batch_size=int(raw.get("upsert_batch_size", 100)),
        )


@dataclass
class ChromaConfig(AbstractVectorStoreConfig):
    path: str = ".chroma"
    collection: str = "knowledge"

    @classmethod
    def from_yaml(cls, raw: dict[str, Any]) -> "ChromaConfig":
        return cls(
            path=raw.get("path") or ".chroma",
            collection=raw.get("collection") or "knowledge",
        )


def parse_vector_store_config(raw: dict[str, Any]) -> AbstractVectorStoreConfig:
    provider_key = raw.get("provider", VectorStoreType.PGVECTOR.value)
    try:
        store_type = VectorStoreType(provider_key)
    except ValueError as e:
        valid = ", ".join(t.value for t in VectorStoreType)
        raise ConfigError(f"Invalid vector store {provider_key!r}. Must be one of: {valid}") from e

    provider_raw = raw.get(provider_key) or {}

    match store_type:
        case VectorStoreType.PGVECTOR:
            return PgVectorConfig.from_yaml(provider_raw)
        case VectorStoreType.SUPABASE:
            return SupabaseConfig.from_yaml(provider_raw)
        case VectorStoreType.PINECONE:
            return PineconeConfig.from_yaml(provider_raw)
        case VectorStoreType.CHROMA:
            return ChromaConfig.from_yaml(provider_raw)
