from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ragbot.errors import ConfigError


class ChunkingProfile(StrEnum):
    KNOWLEDGE = "knowledge"
    CODE = "code"


# (chunk_size, chunk_overlap) per profile
_PROFILE_DEFAULTS: dict[ChunkingProfile, tuple[int, int]] = {
    ChunkingProfile.KNOWLEDGE: (500, 50),
    ChunkingProfile.CODE: (2000, 200),
}

_PROFILE_SUFFIXES: dict[ChunkingProfile, tuple[str, ...]] = {
    ChunkingProfile.KNOWLEDGE: (".txt", ".md"),
    ChunkingProfile.CODE: (".js", ".html"),
}


@dataclass
class ChunkingConfig:
    chunk_size: int = 500
    chunk_overlap: int = 50
    profile: ChunkingProfile = ChunkingProfile.KNOWLEDGE

    @classmethod
    def for_profile(cls, profile: ChunkingProfile) -> "ChunkingConfig":
        size, overlap = _PROFILE_DEFAULTS[profile]
        return cls(chunk_size=size, chunk_overlap=overlap, profile=profile)


@dataclass
class KnowledgeConfig:
    path: str = "data/knowledge.txt"
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    suffixes: tuple[str, ...] = (".txt", ".md")


def parse_knowledge_config(raw: dict[str, Any]) -> KnowledgeConfig:
    profile_key = raw.get("profile", ChunkingProfile.KNOWLEDGE.value)
    try:
        profile = ChunkingProfile(profile_key)
    except ValueError as e:
        raise ConfigError(f"Unknown chunking profile: {profile_key!r}") from e

    chunking = ChunkingConfig.for_profile(profile)
    if "chunk_size" in raw:
        chunking.chunk_size = int(raw["chunk_size"])
    if "chunk_overlap" in raw:
        chunking.chunk_overlap = int(raw["chunk_overlap"])

    suffixes = raw.get("suffixes") or _PROFILE_SUFFIXES[profile]

    return KnowledgeConfig(
        path=str(raw.get("path") or "data/knowledge.txt"),
        chunking=chunking,
        suffixes=tuple(suffixes),
    )
