from typing import Any

from sqlalchemy import text

from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.util.db import get_session
from ragbot.vectorstore.config import PgVectorConfig, VectorStoreType
from ragbot.vectorstore.models import Document
from ragbot.vectorstore.store import AbstractVectorStore

# Cosine similarity = 1 - cosine distance (pgvector ``<=>``)
_MATCH_SQL = text(
    """
    SELECT content,
           metadata,
           1 - (embedding <=> CAST(:embedding AS vector)) AS similarity
    FROM documents
    ORDER BY embedding <=> CAST(:embedding AS vector)
    LIMIT :top_k
    """
)


def _vector_literal(embedding: list[float]) -> str:
    return "[" + ",".join(repr(float(v)) for v in embedding) + "]"


class PgVectorStore(AbstractVectorStore):
    """Postgres + pgvector (Supabase database) accessed through SQLAlchemy.

    Expects :func:`ragbot.util.db.configure_engine` to have been called.
    """

    def __init__(
        self,
        config: PgVectorConfig,
        embedding_provider: AbstractEmbeddingProvider,
    ) -> None:
        super().__init__(embedding_provider)
        self.config = config

    def identify(self) -> VectorStoreType:
        return VectorStoreType.PGVECTOR

    def _write(self, chunks: list[KnowledgeChunk], embeddings: list[list[float]]) -> int:
        rows = [
            Document(content=chunk.content, metadata_=chunk.metadata, embedding=embedding)
            for chunk, embedding in zip(chunks, embeddings, strict=True)
        ]
        # One transaction: the batch is either fully inserted or not at all
        with get_session() as session:
            session.add_all(rows)
            session.commit()
        return len(rows)

    def _query(self, embedding: list[float], k: int) -> list[RetrievalResult]:
        with get_session() as session:
            rows = session.execute(
                _MATCH_SQL,
                {"embedding": _vector_literal(embedding), "top_k": k},
            ).fetchall()

        results: list[RetrievalResult] = []
        for row in rows:
            metadata: dict[str, Any] = dict(row.metadata or {})
            results.append(
                RetrievalResult(
                    chunk=KnowledgeChunk.from_metadata(row.content, metadata),
                    score=float(row.similarity),
                )
            )
        return results
