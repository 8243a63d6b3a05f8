from typing import Any

from anthropic import Anthropic

from ragbot.llm.provider.config import AnthropicConfig
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.types import (
    Message,
    ProviderType,
    TextResponse,
    TokenUsage,
    split_system_prompt,
)


class AnthropicProvider(AbstractProvider):
    """Claude through the Anthropic Messages API."""

    config: AnthropicConfig

    def __init__(self, config: AnthropicConfig) -> None:
        super().__init__(config)
        client_kwargs: dict[str, Any] = {"api_key": config.api_key, "max_retries": 0}
        if config.api_url:
            client_kwargs["base_url"] = config.api_url
        if config.timeout is not None:
            client_kwargs["timeout"] = config.timeout
        self.client = Anthropic(**client_kwargs)

    def identify(self) -> ProviderType:
        return ProviderType.ANTHROPIC

    def _complete(self, messages: list[Message]) -> TextResponse:
        system, conversation = split_system_prompt(messages)
        request: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": conversation,
        }
        if system:
            request["system"] = system
        if self.config.temperature is not None:
            request["temperature"] = self.config.temperature

        reply = self.client.messages.create(**request)

        return TextResponse(
            content="".join(block.text for block in reply.content if block.type == "text"),
            usage=TokenUsage(
                input_tokens=reply.usage.input_tokens,
                output_tokens=reply.usage.output_tokens,
            ),
            stop_reason=reply.stop_reason,
        )
