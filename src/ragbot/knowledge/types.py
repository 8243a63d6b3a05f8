from dataclasses import dataclass, field


def _as_int(value: object, default: int) -> int:
    # Pinecone keeps every number as float64, so 2 comes back as 2.0
    if value is None:
        return default
    return int(float(str(value)))


@dataclass(frozen=True)
class KnowledgeChunk:
    content: str
    source_path: str
    chunk_index: int  # 1-based
    total_chunks: int
    extra: dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.total_chunks < 1 or not 1 <= self.chunk_index <= self.total_chunks:
            raise ValueError(
                f"chunk_index {self.chunk_index} out of range 1..{self.total_chunks}"
            )

    @property
    def metadata(self) -> dict[str, str | int]:
        """Provenance metadata stored next to the embedding."""
        return {
            **self.extra,
            "source": self.source_path,
            "chunk": self.chunk_index,
            "totalChunks": self.total_chunks,
        }

    @classmethod
    def from_metadata(cls, content: str, metadata: dict[str, object]) -> "KnowledgeChunk":
        chunk_index = _as_int(metadata.get("chunk"), 1)
        total_chunks = _as_int(metadata.get("totalChunks"), chunk_index)
        return cls(
            content=content,
            source_path=str(metadata.get("source", "unknown")),
            chunk_index=chunk_index,
            total_chunks=max(total_chunks, chunk_index),
        )


@dataclass
class RetrievalResult:
    chunk: KnowledgeChunk
    score: float  # similarity, higher is closer

    @property
    def content(self) -> str:
        return self.chunk.content
