from typing import Any

from openai import OpenAI

from ragbot.llm.provider.config import OpenAIConfig
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.types import Message, ProviderType, TextResponse, TokenUsage


class OpenAIProvider(AbstractProvider):
    """OpenAI chat-completions provider."""

    config: OpenAIConfig

    def __init__(self, config: OpenAIConfig) -> None:
        super().__init__(config)
        # A failed question is reported to the user, never retried
        client_kwargs: dict[str, Any] = {"api_key": config.api_key, "max_retries": 0}
        if config.api_url:
            client_kwargs["base_url"] = config.api_url
        if config.timeout is not None:
            client_kwargs["timeout"] = config.timeout
        self.client = OpenAI(**client_kwargs)

    def identify(self) -> ProviderType:
        return ProviderType.OPENAI

    def _complete(self, messages: list[Message]) -> TextResponse:
        request: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "max_completion_tokens": self.config.max_tokens,
        }
        if self.config.temperature is not None:
            request["temperature"] = self.config.temperature

        completion = self.client.chat.completions.create(**request)
        choice = completion.choices[0]

        usage = TokenUsage()
        if completion.usage:
            usage = TokenUsage(
                input_tokens=completion.usage.prompt_tokens,
                output_tokens=completion.usage.completion_tokens,
            )
        return TextResponse(
            content=choice.message.content or "",
            usage=usage,
            stop_reason=choice.finish_reason,
        )
