from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ragbot.errors import ConfigError


class SessionBackend(StrEnum):
    MEMORY = "memory"
    REDIS = "redis"


@dataclass
class RedisConfig:
    url: str = "redis://localhost:6379/0"
    key_prefix: str = "ragbot:session:"


@dataclass
class MemoryConfig:
    backend: SessionBackend = SessionBackend.MEMORY
    ttl_seconds: int = 3600
    max_turns: int = 20
    max_history_tokens: int = 2000
    redis: RedisConfig = field(default_factory=RedisConfig)


def parse_memory_config(raw: dict[str, Any]) -> MemoryConfig:
    backend_key = raw.get("backend") or SessionBackend.MEMORY.value
    try:
        backend = SessionBackend(backend_key)
    except ValueError as e:
        raise ConfigError(f"Unknown session backend: {backend_key!r}") from e

    redis_raw = raw.get("redis") or {}
    config = MemoryConfig(
        backend=backend,
        ttl_seconds=int(raw.get("ttl_seconds", 3600)),
        max_turns=int(raw.get("max_turns", 20)),
        max_history_tokens=int(raw.get("max_history_tokens", 2000)),
        redis=RedisConfig(
            url=redis_raw.get("url") or "redis://localhost:6379/0",
            key_prefix=redis_raw.get("key_prefix") or "ragbot:session:",
        ),
    )

    if config.ttl_seconds <= 0:
        raise ConfigError("memory.ttl_seconds must be positive")
    if config.max_turns < 0 or config.max_history_tokens < 0:
        raise ConfigError("memory history limits must not be negative")
    return config
