from typing import Any

import structlog
from pinecone import Pinecone

from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.vectorstore.config import PineconeConfig, VectorStoreType
from ragbot.vectorstore.store import AbstractVectorStore

_logger = structlog.get_logger()

_TEXT_KEY = "text"


def _vector_id(chunk: KnowledgeChunk) -> str:
    return f"{chunk.source_path}:{chunk.chunk_index}"


class PineconeVectorStore(AbstractVectorStore):
    """Pinecone managed index; chunk text travels in the vector metadata."""

    def __init__(
        self,
        config: PineconeConfig,
        embedding_provider: AbstractEmbeddingProvider,
        index: Any | None = None,
    ) -> None:
        super().__init__(embedding_provider)
        self.config = config
        if index is None:
            index = Pinecone(api_key=config.api_key).Index(config.index)
        self._index = index

    def identify(self) -> VectorStoreType:
        return VectorStoreType.PINECONE

    def _write(self, chunks: list[KnowledgeChunk], embeddings: list[list[float]]) -> int:
        vectors = [
            {
                "id": _vector_id(chunk),
                "values": embedding,
                "metadata": {**chunk.metadata, _TEXT_KEY: chunk.content},
            }
            for chunk, embedding in zip(chunks, embeddings, strict=True)
        ]

        written_ids: list[str] = []
        batch_size = self.config.upsert_batch_size
        try:
            for i in range(0, len(vectors), batch_size):
                batch = vectors[i : i + batch_size]
                self._index.upsert(vectors=batch, namespace=self.config.namespace)
                written_ids.extend(v["id"] for v in batch)
        except Exception:
            # Pinecone has no transactions; undo the batches that did land
            if written_ids:
                self._rollback(written_ids)
            raise

        return len(written_ids)

    def _rollback(self, ids: list[str]) -> None:
        _logger.warning("pinecone_partial_upsert_rollback", count=len(ids))
        try:
            self._index.delete(ids=ids, namespace=self.config.namespace)
        except Exception:
            # The upsert error is the one callers see; the leftover ids are only logged
            _logger.error("pinecone_rollback_failed", ids=ids, exc_info=True)

    def _query(self, embedding: list[float], k: int) -> list[RetrievalResult]:
        response = self._index.query(
            vector=embedding,
            top_k=k,
            include_metadata=True,
            namespace=self.config.namespace,
        )

        results: list[RetrievalResult] = []
        for match in response.matches or []:
            metadata: dict[str, Any] = dict(match.metadata or {})
            content = str(metadata.pop(_TEXT_KEY, ""))
            results.append(
                RetrievalResult(
                    chunk=KnowledgeChunk.from_metadata(content, metadata),
                    score=float(match.score or 0.0),
                )
            )
        return results
