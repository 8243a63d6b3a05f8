class RagbotError(Exception):
    """Base class for every error raised by ragbot itself."""


class ConfigError(RagbotError, ValueError):
    """A required setting is missing or invalid (unknown provider, bad chunking, ...)."""


class SourceReadError(RagbotError, OSError):
    """The knowledge source could not be read."""


class EmbeddingError(RagbotError):
    """The embedding provider failed for at least one text in a batch."""


class StoreWriteError(RagbotError):
    """The vector store rejected an insert."""


class RetrievalError(RagbotError):
    """The vector store failed to answer a similarity query."""


class LLMError(RagbotError):
    """A chat-completion call failed or timed out."""


class SessionStoreError(RagbotError):
    """The session store could not load or save a conversation."""


class InvalidQuestionError(RagbotError):
    """The chat request carries no usable question."""
