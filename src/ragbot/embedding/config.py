from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ragbot.errors import ConfigError


class EmbeddingProviderType(StrEnum):
    OPENAI = "openai"
    BEDROCK = "bedrock"
    VERTEX = "vertex"


def _require(raw: dict[str, Any], key: str, section: str) -> str:
    value = str(raw.get(key) or "")
    if not value:
        raise ConfigError(f"Missing 'embedding.{section}.{key}' in config")
    return value


@dataclass
class AbstractEmbeddingConfig(ABC):
    model: str

    @classmethod
    @abstractmethod
    def from_yaml(cls, raw: dict[str, Any], model: str) -> "AbstractEmbeddingConfig": ...


@dataclass
class OpenAIEmbeddingConfig(AbstractEmbeddingConfig):
    api_key: str
    api_url: str | None = None

    @classmethod
    def from_yaml(cls, raw: dict[str, Any], model: str) -> "OpenAIEmbeddingConfig":
        api_key = _require(raw, "api_key", "openai")
        return cls(model=model, api_key=api_key, api_url=raw.get("api_url") or None)


@dataclass
class BedrockEmbeddingConfig(AbstractEmbeddingConfig):
    region: str

    @classmethod
    def from_yaml(cls, raw: dict[str, Any], model: str) -> "BedrockEmbeddingConfig":
        return cls(model=model, region=_require(raw, "region", "bedrock"))


@dataclass
class VertexEmbeddingConfig(AbstractEmbeddingConfig):
    project_id: str
    location: str

    @classmethod
    def from_yaml(cls, raw: dict[str, Any], model: str) -> "VertexEmbeddingConfig":
        return cls(
            model=model,
            project_id=_require(raw, "project_id", "vertex"),
            location=_require(raw, "location", "vertex"),
        )


def parse_embedding_config(raw: dict[str, Any]) -> AbstractEmbeddingConfig:
    provider_key = raw.get("provider", "openai")
    try:
        provider_type = EmbeddingProviderType(provider_key)
    except ValueError as e:
        raise ConfigError(f"Unknown embedding provider: {provider_key!r}") from e

    model = raw.get("model", "")
    if not model:
        raise ConfigError("Missing 'embedding.model' in config")

    provider_raw = raw.get(provider_key) or {}

    match provider_type:
        case EmbeddingProviderType.OPENAI:
            return OpenAIEmbeddingConfig.from_yaml(provider_raw, model)
        case EmbeddingProviderType.BEDROCK:
            return BedrockEmbeddingConfig.from_yaml(provider_raw, model)
        case EmbeddingProviderType.VERTEX:
            return VertexEmbeddingConfig.from_yaml(provider_raw, model)
