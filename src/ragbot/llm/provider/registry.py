from pathlib import Path

import structlog

from ragbot.errors import ConfigError
from ragbot.llm.provider.config import DEFAULT_PROVIDER_CONFIG, ProviderConfigGenerator
from ragbot.llm.provider.factory import ProviderFactory
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.types import ProviderType

_logger = structlog.get_logger()


class ProviderRegistry:
    """Every LLM provider whose configuration is complete, keyed by type."""

    def __init__(self, config_location: Path = DEFAULT_PROVIDER_CONFIG) -> None:
        self.providers: dict[ProviderType, AbstractProvider] = {}
        self._build(config_location)

    def get(self, provider_type: ProviderType | str) -> AbstractProvider:
        try:
            key = ProviderType(provider_type)
        except ValueError as e:
            raise ConfigError(f"Unknown LLM provider: {provider_type!r}") from e

        if key not in self.providers:
            available = ", ".join(p.value for p in self.providers) or "none"
            raise ConfigError(f"LLM provider {key.value!r} not configured (available: {available})")
        return self.providers[key]

    def _build(self, config_location: Path) -> None:
        for provider_config in ProviderConfigGenerator(config_location).generate():
            if not provider_config.enabled:
                continue

            try:
                provider = ProviderFactory().from_config(provider_config)
                self._register_provider(provider.identify(), provider)
            except (ValueError, ImportError, ConnectionError, TimeoutError) as e:
                _logger.error(
                    "provider_registration_failed",
                    error=str(e),
                )

        if not self.providers:
            raise ConfigError("No LLM provider registered; check config/llm_provider.yaml")
        _logger.info("registry_initialized", provider_count=len(self.providers))

    def _register_provider(self, identifier: ProviderType, provider: AbstractProvider) -> None:
        self.providers[identifier] = provider
        _logger.info("provider_registered", identifier=identifier.value)
