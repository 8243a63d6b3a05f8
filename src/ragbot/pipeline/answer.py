import structlog

from ragbot.errors import InvalidQuestionError
from ragbot.knowledge.types import RetrievalResult
from ragbot.llm.provider import AbstractProvider, Message, TextResponse
from ragbot.memory.config import MemoryConfig
from ragbot.memory.history import format_history
from ragbot.memory.types import ConversationTurn
from ragbot.pipeline.prompts import PromptTemplates
from ragbot.vectorstore.store import AbstractVectorStore

_logger = structlog.get_logger()

CONTEXT_DELIMITER = "\n\n"


def combine_documents(results: list[RetrievalResult]) -> str:
    """Join retrieved chunk contents in ranked order."""
    return CONTEXT_DELIMITER.join(r.content for r in results)


class AnswerPipeline:
    """Condense -> retrieve -> assemble -> answer.

    Stateless between calls; the only per-conversation input is the history
    handed to :meth:`answer`. Any stage failing aborts the whole call.
    """

    def __init__(
        self,
        provider: AbstractProvider,
        vector_store: AbstractVectorStore,
        prompts: PromptTemplates,
        top_k: int = 3,
        memory_config: MemoryConfig | None = None,
    ) -> None:
        self._provider = provider
        self._vector_store = vector_store
        self._prompts = prompts
        self._top_k = top_k
        self._memory_config = memory_config or MemoryConfig()

    def _ask(self, prompt: str) -> TextResponse:
        return self._provider.complete([Message.user(prompt)])

    def condense(self, question: str, conversation_history: str) -> str:
        prompt = self._prompts.render_standalone(question, conversation_history)
        standalone = self._ask(prompt).content.strip()
        # An empty rewrite would retrieve nothing useful; fall back to the raw question
        return standalone or question

    def answer(self, user_question: str, history: list[ConversationTurn]) -> str:
        question = (user_question or "").strip()
        if not question:
            raise InvalidQuestionError("userQuestion must be a non-empty string")

        conversation_history = format_history(
            history,
            max_turns=self._memory_config.max_turns,
            max_tokens=self._memory_config.max_history_tokens,
        )

        standalone = self.condense(question, conversation_history)
        _logger.debug("standalone_question", preview=standalone[:80])

        results = self._vector_store.retrieve(standalone, k=self._top_k)
        context = combine_documents(results)

        prompt = self._prompts.render_answer(
            question=question,
            context=context,
            conversation_history=conversation_history,
        )
        response = self._ask(prompt)
        reply = response.content.strip()

        _logger.info(
            "answer_generated",
            history_turns=len(history),
            retrieved=len(results),
            answer_chars=len(reply),
            answer_tokens=response.usage.total_tokens,
        )
        return reply
