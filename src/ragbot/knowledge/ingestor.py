from pathlib import Path

import structlog

from ragbot.errors import SourceReadError
from ragbot.knowledge.chunker import Chunker
from ragbot.knowledge.types import KnowledgeChunk
from ragbot.util import PROJECT_ROOT

_logger = structlog.get_logger()


def resolve_path(path: str | Path) -> Path:
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = PROJECT_ROOT / resolved
    return resolved


def read_source(path: str | Path) -> str:
    """Read a knowledge file as UTF-8 text."""
    file_path = resolve_path(path)
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read knowledge source {file_path}: {e}") from e


def _display_path(file_path: Path) -> str:
    if file_path.is_relative_to(PROJECT_ROOT):
        return str(file_path.relative_to(PROJECT_ROOT))
    return str(file_path)


class KnowledgeIngestor:
    """Turns knowledge files into numbered, overlapping chunks."""

    def __init__(self, chunker: Chunker) -> None:
        self._chunker = chunker

    def ingest(self, source_text: str, source_path: str) -> list[KnowledgeChunk]:
        chunks = self._chunker.chunk_text(source_text, source_path)
        _logger.info("source_chunked", source=source_path, chunks=len(chunks))
        return chunks

    def ingest_file(self, path: str | Path) -> list[KnowledgeChunk]:
        file_path = resolve_path(path)
        return self.ingest(read_source(file_path), _display_path(file_path))

    def ingest_directory(
        self,
        path: str | Path,
        suffixes: tuple[str, ...] = (".txt", ".md"),
    ) -> list[KnowledgeChunk]:
        """Ingest every matching file below *path*, in sorted order."""
        dir_path = resolve_path(path)
        if not dir_path.is_dir():
            raise SourceReadError(f"Knowledge directory not found: {dir_path}")

        _logger.info("indexing_local_dir", path=str(dir_path))

        chunks: list[KnowledgeChunk] = []
        for file_path in sorted(dir_path.rglob("*")):
            if file_path.suffix not in suffixes or not file_path.is_file():
                continue

            text = read_source(file_path)
            if not text.strip():
                _logger.debug("empty_source_skipped", path=str(file_path))
                continue

            chunks.extend(self.ingest(text, _display_path(file_path)))

        _logger.info("local_indexed", total_chunks=len(chunks))
        return chunks

    def ingest_path(
        self,
        path: str | Path,
        suffixes: tuple[str, ...] = (".txt", ".md"),
    ) -> list[KnowledgeChunk]:
        if resolve_path(path).is_dir():
            return self.ingest_directory(path, suffixes)
        return self.ingest_file(path)
