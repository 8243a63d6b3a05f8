from ragbot.llm.provider.config import (
    AbstractProviderConfig,
    AnthropicConfig,
    BedrockConfig,
    OpenAIConfig,
    VertexConfig,
)
from ragbot.llm.provider.factory import ProviderFactory
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.registry import ProviderRegistry
from ragbot.llm.provider.types import (
    Message,
    MessageRole,
    ProviderType,
    TextResponse,
    TokenUsage,
)

__all__ = [
    "AbstractProvider",
    "AbstractProviderConfig",
    "AnthropicConfig",
    "BedrockConfig",
    "Message",
    "MessageRole",
    "OpenAIConfig",
    "ProviderFactory",
    "ProviderRegistry",
    "ProviderType",
    "TextResponse",
    "TokenUsage",
    "VertexConfig",
]
