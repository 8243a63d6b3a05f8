from dataclasses import dataclass
from pathlib import Path

import structlog

from ragbot.config import RagbotConfig
from ragbot.embedding import create_embedding_provider
from ragbot.knowledge.chunker import Chunker
from ragbot.knowledge.config import KnowledgeConfig
from ragbot.knowledge.ingestor import KnowledgeIngestor
from ragbot.llm.provider import AbstractProvider, ProviderRegistry
from ragbot.memory.service import ConversationMemory, create_session_store
from ragbot.pipeline.answer import AnswerPipeline
from ragbot.pipeline.chat import ChatService
from ragbot.pipeline.prompts import PromptTemplates, load_prompts
from ragbot.vectorstore import AbstractVectorStore, create_vector_store

_logger = structlog.get_logger()


@dataclass
class KnowledgeIndexer:
    """Chunks the configured knowledge source and stores it in the vector store."""

    config: KnowledgeConfig
    ingestor: KnowledgeIngestor
    vector_store: AbstractVectorStore

    def index(self, path: str | Path | None = None) -> int:
        """Returns the number of rows written."""
        source = path or self.config.path
        chunks = self.ingestor.ingest_path(source, self.config.suffixes)
        if not chunks:
            _logger.warning("no_chunks_produced", source=str(source))
            return 0
        return self.vector_store.embed_and_store(chunks)


@dataclass
class Components:
    """Everything a running bot needs, wired once at startup."""

    config: RagbotConfig
    indexer: KnowledgeIndexer
    chat_service: ChatService

    @property
    def vector_store(self) -> AbstractVectorStore:
        return self.indexer.vector_store

    def init_knowledge(self, path: str | Path | None = None) -> int:
        return self.indexer.index(path)


def build_indexer(
    config: RagbotConfig,
    vector_store: AbstractVectorStore | None = None,
) -> KnowledgeIndexer:
    if vector_store is None:
        embedding_provider = create_embedding_provider(config.embedding)
        vector_store = create_vector_store(config.vector_store, embedding_provider)

    return KnowledgeIndexer(
        config=config.knowledge,
        ingestor=KnowledgeIngestor(Chunker(config.knowledge.chunking)),
        vector_store=vector_store,
    )


def build_components(
    config: RagbotConfig,
    provider: AbstractProvider | None = None,
    vector_store: AbstractVectorStore | None = None,
    prompts: PromptTemplates | None = None,
) -> Components:
    """Assemble the bot from configuration.

    *provider*, *vector_store* and *prompts* may be passed in to replace the
    configured collaborators.
    """
    indexer = build_indexer(config, vector_store)

    if provider is None:
        provider = ProviderRegistry().get(config.llm_provider)

    memory = ConversationMemory(create_session_store(config.memory), config.memory)
    pipeline = AnswerPipeline(
        provider=provider,
        vector_store=indexer.vector_store,
        prompts=prompts or load_prompts(),
        top_k=config.retrieval.top_k,
        memory_config=config.memory,
    )

    _logger.info(
        "components_ready",
        llm_provider=provider.identify().value,
        vector_store=indexer.vector_store.identify().value,
        session_backend=config.memory.backend.value,
    )

    return Components(
        config=config,
        indexer=indexer,
        chat_service=ChatService(pipeline, memory),
    )
