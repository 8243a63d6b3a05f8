from typing import Any

import chromadb

from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.knowledge.ingestor import resolve_path
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.vectorstore.config import ChromaConfig, VectorStoreType
from ragbot.vectorstore.store import AbstractVectorStore

# ChromaDB limit is ~41666 per call
_UPSERT_BATCH_SIZE = 5000


class ChromaVectorStore(AbstractVectorStore):
    """Local persistent Chroma collection, handy for development without a database."""

    def __init__(
        self,
        config: ChromaConfig,
        embedding_provider: AbstractEmbeddingProvider,
        client: Any | None = None,
    ) -> None:
        super().__init__(embedding_provider)
        self.config = config
        if client is None:
            storage_path = resolve_path(config.path)
            storage_path.mkdir(parents=True, exist_ok=True)
            client = chromadb.PersistentClient(path=str(storage_path))
        self._collection = client.get_or_create_collection(
            name=config.collection,
            metadata={"hnsw:space": "cosine"},
        )

    def identify(self) -> VectorStoreType:
        return VectorStoreType.CHROMA

    def _write(self, chunks: list[KnowledgeChunk], embeddings: list[list[float]]) -> int:
        # Deterministic ids make re-indexing the same file overwrite, not duplicate
        for start in range(0, len(chunks), _UPSERT_BATCH_SIZE):
            window = chunks[start : start + _UPSERT_BATCH_SIZE]
            self._collection.upsert(
                ids=[f"{c.source_path}:{c.chunk_index}" for c in window],
                embeddings=embeddings[start : start + len(window)],  # type: ignore[arg-type]
                documents=[c.content for c in window],
                metadatas=[c.metadata for c in window],  # type: ignore[arg-type]
            )
        return len(chunks)

    def _query(self, embedding: list[float], k: int) -> list[RetrievalResult]:
        stored = self._collection.count()
        if stored == 0:
            return []

        response = self._collection.query(
            query_embeddings=[embedding],  # type: ignore[arg-type]
            n_results=min(k, stored),
            include=["documents", "metadatas", "distances"],
        )
        # One query embedding, so every field holds a single inner list
        texts = (response.get("documents") or [[]])[0]
        distances = (response.get("distances") or [[]])[0]
        metadatas = (response.get("metadatas") or [[]])[0] or [None] * len(texts)

        return [
            RetrievalResult(
                chunk=KnowledgeChunk.from_metadata(text, dict(metadata or {})),
                score=1.0 - float(distance),
            )
            for text, distance, metadata in zip(texts, distances, metadatas, strict=False)
        ]
