import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypedDict

import structlog

from ragbot.errors import ConfigError
from ragbot.llm.provider.types import ProviderType
from ragbot.util import PROJECT_ROOT, load_yaml_config

_logger = structlog.get_logger()
DEFAULT_PROVIDER_CONFIG = PROJECT_ROOT / "config" / "llm_provider.yaml"

DEFAULT_MAX_TOKENS = 1024


class _CommonConfig(TypedDict):
    model: str
    temperature: float | None
    max_tokens: int
    timeout: float | None
    api_url: str | None


def _optional_env(envs: dict[str, Any], key: str) -> str:
    """Value of the env var named by ``envs[key]``; empty when either is unset."""
    var_name = envs.get(key, "")
    return os.getenv(var_name, "") if var_name else ""


def _require_env(envs: dict[str, Any], key: str) -> str:
    value = _optional_env(envs, key)
    if not value:
        raise ConfigError(f"Missing env var: {envs.get(key) or key}")
    return value


@dataclass
class AbstractProviderConfig(ABC):
    model: str
    temperature: float | None
    max_tokens: int
    timeout: float | None = field(default=None, kw_only=True)
    api_url: str | None = field(default=None, kw_only=True)
    enabled: bool = field(default=True, kw_only=True)

    @classmethod
    def _read_common_config(cls, yaml_config: dict[str, Any]) -> _CommonConfig:
        """Settings every provider shares, unpacked with ** into subclasses.

        ``timeout`` is in seconds; unset keeps the SDK default.
        """
        model = _require_env(yaml_config, "model_env")
        temperature = _optional_env(yaml_config, "temperature_env")
        max_tokens = _optional_env(yaml_config, "max_tokens_env")
        timeout = _optional_env(yaml_config, "timeout_env")
        try:
            return _CommonConfig(
                model=model,
                temperature=float(temperature) if temperature else None,
                max_tokens=int(max_tokens) if max_tokens else DEFAULT_MAX_TOKENS,
                timeout=float(timeout) if timeout else None,
                api_url=_optional_env(yaml_config, "api_url_env") or None,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric provider setting: {e}") from e

    @classmethod
    @abstractmethod
    def from_envs(cls, envs: dict[str, Any]) -> "AbstractProviderConfig":
        """Build the config from a YAML block of ``*_env`` keys."""
        ...


@dataclass
class OpenAIConfig(AbstractProviderConfig):
    api_key: str

    @classmethod
    def from_envs(cls, envs: dict[str, Any]) -> "OpenAIConfig":
        common = cls._read_common_config(envs)
        return cls(api_key=_require_env(envs, "api_key_env"), **common)


@dataclass
class AnthropicConfig(AbstractProviderConfig):
    api_key: str

    @classmethod
    def from_envs(cls, envs: dict[str, Any]) -> "AnthropicConfig":
        common = cls._read_common_config(envs)
        return cls(api_key=_require_env(envs, "api_key_env"), **common)


@dataclass
class BedrockConfig(AbstractProviderConfig):
    region: str
    anthropic_version: str

    @classmethod
    def from_envs(cls, envs: dict[str, Any]) -> "BedrockConfig":
        common = cls._read_common_config(envs)
        region = _require_env(envs, "region_env")
        anthropic_version = _optional_env(envs, "anthropic_version_env") or "bedrock-2023-05-31"
        return cls(region=region, anthropic_version=anthropic_version, **common)


@dataclass
class VertexConfig(AbstractProviderConfig):
    project_id: str
    location: str

    @classmethod
    def from_envs(cls, envs: dict[str, Any]) -> "VertexConfig":
        common = cls._read_common_config(envs)
        return cls(
            project_id=_require_env(envs, "project_id_env"),
            location=_require_env(envs, "location_env"),
            **common,
        )


_CONFIG_CLASSES: dict[ProviderType, type[AbstractProviderConfig]] = {
    ProviderType.OPENAI: OpenAIConfig,
    ProviderType.ANTHROPIC: AnthropicConfig,
    ProviderType.BEDROCK: BedrockConfig,
    ProviderType.VERTEX: VertexConfig,
}


class ProviderConfigGenerator:
    """Yields a config for every provider block whose environment is complete."""

    def __init__(self, config_location: Path = DEFAULT_PROVIDER_CONFIG) -> None:
        self.config = load_yaml_config(config_location)

    def generate(self) -> Iterator[AbstractProviderConfig]:
        for provider_key, provider_block in self.config.items():
            try:
                config_class = _CONFIG_CLASSES[ProviderType(provider_key)]
            except ValueError:
                _logger.warning("provider_unknown", provider=provider_key)
                continue

            envs = provider_block or {}
            try:
                config = config_class.from_envs(envs)
            except ConfigError as e:
                # Expected for every provider the deployment does not use
                _logger.debug("provider_skipped", provider=provider_key, reason=str(e))
                continue

            config.enabled = bool(envs.get("enabled", True))
            yield config
