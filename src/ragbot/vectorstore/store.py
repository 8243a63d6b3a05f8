from abc import ABC, abstractmethod

import structlog

from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.errors import EmbeddingError, RetrievalError, StoreWriteError
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.vectorstore.config import VectorStoreType

_logger = structlog.get_logger()


class AbstractVectorStore(ABC):
    """Embeds and persists chunks; answers nearest-neighbour queries.

    Subclasses implement the backend calls (``_write`` and ``_query``); this
    base class owns embedding, error wrapping and result ordering so every
    backend honours the same contract.
    """

    def __init__(self, embedding_provider: AbstractEmbeddingProvider) -> None:
        self._embedding_provider = embedding_provider

    @abstractmethod
    def identify(self) -> VectorStoreType: ...

    @abstractmethod
    def _write(self, chunks: list[KnowledgeChunk], embeddings: list[list[float]]) -> int:
        """Persist rows; SDK errors propagate."""
        ...

    @abstractmethod
    def _query(self, embedding: list[float], k: int) -> list[RetrievalResult]:
        """Top-k search for *embedding*; SDK errors propagate."""
        ...

    def embed_and_store(self, chunks: list[KnowledgeChunk]) -> int:
        if not chunks:
            return 0

        _logger.info("storing_chunks", store=self.identify().value, count=len(chunks))

        # EmbeddingError propagates before anything is written
        embeddings = self._embedding_provider.embed([c.content for c in chunks])
        if len(embeddings) != len(chunks):
            raise EmbeddingError(f"expected {len(chunks)} vectors, got {len(embeddings)}")

        try:
            written = self._write(chunks, embeddings)
        except StoreWriteError:
            raise
        except Exception as e:
            raise StoreWriteError(f"Error inserting: {e}") from e

        _logger.info("chunks_stored", store=self.identify().value, count=written)
        return written

    def retrieve(self, query: str, k: int = 3) -> list[RetrievalResult]:
        if k < 1:
            raise ValueError(f"k must be a positive integer, got {k}")

        try:
            embedding = self._embedding_provider.embed_query(query)
        except EmbeddingError as e:
            raise RetrievalError(f"Cannot embed query: {e}") from e

        try:
            results = self._query(embedding, k)
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(f"{self.identify().value} query failed: {e}") from e

        results.sort(key=lambda r: r.score, reverse=True)
        results = results[:k]

        _logger.debug(
            "knowledge_retrieval",
            store=self.identify().value,
            query_preview=query[:80],
            k=k,
            matched=len(results),
        )
        return results
