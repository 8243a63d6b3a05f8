from ragbot.knowledge.chunker import Chunker, count_tokens
from ragbot.knowledge.config import (
    ChunkingConfig,
    ChunkingProfile,
    KnowledgeConfig,
    parse_knowledge_config,
)
from ragbot.knowledge.ingestor import KnowledgeIngestor, read_source
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult

__all__ = [
    "Chunker",
    "ChunkingConfig",
    "ChunkingProfile",
    "KnowledgeChunk",
    "KnowledgeConfig",
    "KnowledgeIngestor",
    "RetrievalResult",
    "count_tokens",
    "parse_knowledge_config",
    "read_source",
]
