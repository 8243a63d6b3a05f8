from ragbot.embedding.config import (
    AbstractEmbeddingConfig,
    BedrockEmbeddingConfig,
    EmbeddingProviderType,
    OpenAIEmbeddingConfig,
    VertexEmbeddingConfig,
    parse_embedding_config,
)
from ragbot.embedding.provider import AbstractEmbeddingProvider, EmbeddingPurpose
from ragbot.errors import ConfigError


def create_embedding_provider(config: AbstractEmbeddingConfig) -> AbstractEmbeddingProvider:
    # Adapters import their SDKs at module level; only load the one in use.
    match config:
        case OpenAIEmbeddingConfig():
            from ragbot.embedding.adapters.openai import OpenAIEmbeddingProvider

            return OpenAIEmbeddingProvider(config)
        case BedrockEmbeddingConfig():
            from ragbot.embedding.adapters.bedrock import BedrockEmbeddingProvider

            return BedrockEmbeddingProvider(config)
        case VertexEmbeddingConfig():
            from ragbot.embedding.adapters.vertex import VertexEmbeddingProvider

            return VertexEmbeddingProvider(config)
        case _:
            raise ConfigError(f"Unknown embedding config: {type(config).__name__}")


__all__ = [
    "AbstractEmbeddingConfig",
    "AbstractEmbeddingProvider",
    "BedrockEmbeddingConfig",
    "EmbeddingProviderType",
    "EmbeddingPurpose",
    "OpenAIEmbeddingConfig",
    "VertexEmbeddingConfig",
    "create_embedding_provider",
    "parse_embedding_config",
]
