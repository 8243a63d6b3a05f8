import json
from typing import Any

import boto3  # type: ignore[import-untyped]
from botocore.config import Config  # type: ignore[import-untyped]

from ragbot.llm.provider.config import BedrockConfig
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.types import (
    Message,
    ProviderType,
    TextResponse,
    TokenUsage,
    split_system_prompt,
)


class BedrockProvider(AbstractProvider):
    """Claude models hosted on AWS Bedrock, called with the Messages body format."""

    config: BedrockConfig

    def __init__(self, config: BedrockConfig) -> None:
        super().__init__(config)
        botocore_kwargs: dict[str, Any] = {"retries": {"max_attempts": 1, "mode": "standard"}}
        if config.timeout is not None:
            botocore_kwargs["read_timeout"] = config.timeout

        client_kwargs: dict[str, Any] = {
            "region_name": config.region,
            "config": Config(**botocore_kwargs),
        }
        if config.api_url:
            client_kwargs["endpoint_url"] = config.api_url
        self.client = boto3.client("bedrock-runtime", **client_kwargs)

    def identify(self) -> ProviderType:
        return ProviderType.BEDROCK

    def _build_body(self, messages: list[Message]) -> str:
        system, conversation = split_system_prompt(messages)
        body: dict[str, Any] = {
            "anthropic_version": self.config.anthropic_version,
            "max_tokens": self.config.max_tokens,
            "messages": conversation,
        }
        if system:
            body["system"] = system
        if self.config.temperature is not None:
            body["temperature"] = self.config.temperature
        return json.dumps(body)

    def _complete(self, messages: list[Message]) -> TextResponse:
        raw = self.client.invoke_model(
            modelId=self.config.model,
            contentType="application/json",
            accept="application/json",
            body=self._build_body(messages),
        )
        payload = json.loads(raw["body"].read())

        text_blocks = [
            block.get("text", "")
            for block in payload.get("content", [])
            if block.get("type") == "text"
        ]
        token_counts = payload.get("usage") or {}
        return TextResponse(
            content="".join(text_blocks),
            usage=TokenUsage(
                input_tokens=token_counts.get("input_tokens", 0),
                output_tokens=token_counts.get("output_tokens", 0),
            ),
            stop_reason=payload.get("stop_reason"),
        )
