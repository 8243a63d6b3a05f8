from functools import lru_cache

import tiktoken
from langchain_text_splitters import Language, RecursiveCharacterTextSplitter

from ragbot.errors import ConfigError
from ragbot.knowledge.config import ChunkingConfig, ChunkingProfile
from ragbot.knowledge.types import KnowledgeChunk

KNOWLEDGE_SEPARATORS = ["\n\n", "\n", " ", ""]


class Chunker:
    """Splits text into overlapping character-bounded chunks.

    Separators are tried in order (paragraph, line, word, character) so a
    chunk only breaks mid-word when a single word exceeds ``chunk_size``.
    """

    def __init__(self, config: ChunkingConfig) -> None:
        if config.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be positive, got {config.chunk_size}")
        if config.chunk_overlap < 0:
            raise ConfigError(f"chunk_overlap must not be negative, got {config.chunk_overlap}")
        if config.chunk_overlap >= config.chunk_size:
            raise ConfigError(
                f"chunk_overlap ({config.chunk_overlap}) must be smaller than "
                f"chunk_size ({config.chunk_size})"
            )

        self._config = config
        if config.profile is ChunkingProfile.CODE:
            self._splitter = RecursiveCharacterTextSplitter.from_language(
                Language.JS,
                chunk_size=config.chunk_size,
                chunk_overlap=config.chunk_overlap,
            )
        else:
            self._splitter = RecursiveCharacterTextSplitter(
                separators=KNOWLEDGE_SEPARATORS,
                chunk_size=config.chunk_size,
                chunk_overlap=config.chunk_overlap,
                length_function=len,
            )

    @property
    def config(self) -> ChunkingConfig:
        return self._config

    def chunk_text(self, text: str, source_path: str) -> list[KnowledgeChunk]:
        """Split *text* and number the pieces 1..N for *source_path*."""
        if not text.strip():
            return []

        pieces = self._splitter.split_text(text)
        total = len(pieces)
        return [
            KnowledgeChunk(
                content=piece,
                source_path=source_path,
                chunk_index=index,
                total_chunks=total,
            )
            for index, piece in enumerate(pieces, 1)
        ]


@lru_cache(maxsize=1)
def _encoding() -> tiktoken.Encoding:
    # Loaded on first use; the BPE file may need a download
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """Count tokens using the cl100k_base encoding."""
    return len(_encoding().encode(text))
