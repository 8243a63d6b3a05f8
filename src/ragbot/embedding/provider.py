from abc import ABC, abstractmethod
from enum import StrEnum

import structlog

from ragbot.embedding.config import AbstractEmbeddingConfig
from ragbot.errors import EmbeddingError

_logger = structlog.get_logger()


class EmbeddingPurpose(StrEnum):
    """Asymmetric models embed stored passages and search queries differently."""

    DOCUMENT = "document"
    QUERY = "query"


class AbstractEmbeddingProvider(ABC):
    def __init__(self, config: AbstractEmbeddingConfig) -> None:
        self.config = config

    @property
    @abstractmethod
    def max_batch_size(self) -> int: ...

    @abstractmethod
    def _embed_batch(self, texts: list[str], purpose: EmbeddingPurpose) -> list[list[float]]:
        """Call the backing model for one batch; SDK errors propagate."""
        ...

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed knowledge chunks for storage, batching as the backend requires.

        All-or-nothing: any failure raises :class:`EmbeddingError` and no
        vectors are returned.
        """
        return self._embed_all(texts, EmbeddingPurpose.DOCUMENT)

    def embed_query(self, text: str) -> list[float]:
        """Embed one search query."""
        return self._embed_all([text], EmbeddingPurpose.QUERY)[0]

    def _embed_all(self, texts: list[str], purpose: EmbeddingPurpose) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.max_batch_size):
            batch = texts[start : start + self.max_batch_size]
            _logger.debug(
                "embedding_batch",
                model=self.config.model,
                purpose=purpose.value,
                batch_size=len(batch),
            )
            try:
                vectors.extend(self._embed_batch(batch, purpose))
            except EmbeddingError:
                raise
            except Exception as e:
                raise EmbeddingError(f"{self.config.model}: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"{self.config.model}: expected {len(texts)} vectors, got {len(vectors)}"
            )
        return vectors
