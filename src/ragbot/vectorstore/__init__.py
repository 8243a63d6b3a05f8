from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.errors import ConfigError
from ragbot.vectorstore.config import (
    AbstractVectorStoreConfig,
    ChromaConfig,
    PgVectorConfig,
    PineconeConfig,
    SupabaseConfig,
    VectorStoreType,
    parse_vector_store_config,
)
from ragbot.vectorstore.store import AbstractVectorStore


def create_vector_store(
    config: AbstractVectorStoreConfig,
    embedding_provider: AbstractEmbeddingProvider,
) -> AbstractVectorStore:
    # Each adapter pulls in its own SDK; import only the selected one.
    match config:
        case PgVectorConfig():
            from ragbot.util.db import configure_engine, init_db
            from ragbot.vectorstore.adapters.pgvector import PgVectorStore

            configure_engine(config.database_url)
            init_db()
            return PgVectorStore(config, embedding_provider)
        case SupabaseConfig():
            from ragbot.vectorstore.adapters.supabase import SupabaseVectorStore

            return SupabaseVectorStore(config, embedding_provider)
        case PineconeConfig():
            from ragbot.vectorstore.adapters.pinecone import PineconeVectorStore

            return PineconeVectorStore(config, embedding_provider)
        case ChromaConfig():
            from ragbot.vectorstore.adapters.chroma import ChromaVectorStore

            return ChromaVectorStore(config, embedding_provider)
        case _:
            raise ConfigError(f"Unknown vector store config: {type(config).__name__}")


__all__ = [
    "AbstractVectorStore",
    "AbstractVectorStoreConfig",
    "ChromaConfig",
    "PgVectorConfig",
    "PineconeConfig",
    "SupabaseConfig",
    "VectorStoreType",
    "create_vector_store",
    "parse_vector_store_config",
]
