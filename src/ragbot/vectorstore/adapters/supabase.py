from typing import Any

from supabase import Client, create_client

from ragbot.embedding.provider import AbstractEmbeddingProvider
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.vectorstore.config import SupabaseConfig, VectorStoreType
from ragbot.vectorstore.store import AbstractVectorStore


class SupabaseVectorStore(AbstractVectorStore):
    """Supabase REST API: inserts into the ``documents`` table and queries the
    ``match_documents`` SQL function.

    ``match_documents(query_embedding, match_count, filter)`` is the function
    created by the standard Supabase vector-store setup script; it returns
    ``content``, ``metadata`` and ``similarity`` columns.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        embedding_provider: AbstractEmbeddingProvider,
        client: Client | None = None,
    ) -> None:
        super().__init__(embedding_provider)
        self.config = config
        self._client = client if client is not None else create_client(config.url, config.api_key)

    def identify(self) -> VectorStoreType:
        return VectorStoreType.SUPABASE

    def _write(self, chunks: list[KnowledgeChunk], embeddings: list[list[float]]) -> int:
        rows = [
            {
                "content": chunk.content,
                "embedding": embedding,
                "metadata": chunk.metadata,
            }
            for chunk, embedding in zip(chunks, embeddings, strict=True)
        ]
        # A single insert call is a single statement on the server
        response = self._client.table(self.config.table).insert(rows).execute()
        return len(response.data) if response.data else len(rows)

    def _query(self, embedding: list[float], k: int) -> list[RetrievalResult]:
        response = self._client.rpc(
            self.config.query_name,
            {"query_embedding": embedding, "match_count": k, "filter": {}},
        ).execute()

        results: list[RetrievalResult] = []
        for row in response.data or []:
            metadata: dict[str, Any] = row.get("metadata") or {}
            results.append(
                RetrievalResult(
                    chunk=KnowledgeChunk.from_metadata(row.get("content", ""), metadata),
                    score=float(row.get("similarity", 0.0)),
                )
            )
        return results
