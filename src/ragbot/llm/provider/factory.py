from ragbot.errors import ConfigError
from ragbot.llm.provider.config import (
    AbstractProviderConfig,
    AnthropicConfig,
    BedrockConfig,
    OpenAIConfig,
    VertexConfig,
)
from ragbot.llm.provider.provider import AbstractProvider


class ProviderFactory:
    def from_config(self, config: AbstractProviderConfig) -> AbstractProvider:
        # Adapters import their SDKs at module level; only load the one in use.
        match config:
            case OpenAIConfig():
                from ragbot.llm.provider.adapters.openai import OpenAIProvider

                return OpenAIProvider(config)
            case AnthropicConfig():
                from ragbot.llm.provider.adapters.anthropic import AnthropicProvider

                return AnthropicProvider(config)
            case BedrockConfig():
                from ragbot.llm.provider.adapters.bedrock import BedrockProvider

                return BedrockProvider(config)
            case VertexConfig():
                from ragbot.llm.provider.adapters.vertex import VertexProvider

                return VertexProvider(config)
            case _:
                raise ConfigError(f"Unknown provider config class: {config}")
