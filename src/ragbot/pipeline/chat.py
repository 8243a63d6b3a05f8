from dataclasses import dataclass

import structlog

from ragbot.errors import InvalidQuestionError
from ragbot.memory.service import ConversationMemory
from ragbot.memory.types import ConversationTurn, TurnRole
from ragbot.pipeline.answer import AnswerPipeline

_logger = structlog.get_logger()


@dataclass
class ChatResult:
    response: str
    history: list[ConversationTurn]
    conversation_id: str


class ChatService:
    """One chat request: load history, answer, record both turns, save."""

    def __init__(self, pipeline: AnswerPipeline, memory: ConversationMemory) -> None:
        self._pipeline = pipeline
        self._memory = memory

    def chat(
        self,
        user_question: str | None,
        history: list[ConversationTurn] | None = None,
        conversation_id: str | None = None,
    ) -> ChatResult:
        question = (user_question or "").strip()
        if not question:
            raise InvalidQuestionError("userQuestion must be a non-empty string")

        session = self._memory.begin(conversation_id, history)
        prior_history = list(session.history)

        session.append(ConversationTurn(role=TurnRole.USER, content=question))
        reply = self._pipeline.answer(question, prior_history)
        session.append(ConversationTurn(role=TurnRole.ASSISTANT, content=reply))

        # Only reached when the pipeline succeeded: failed requests leave no trace
        self._memory.commit(session)

        _logger.info(
            "chat_request_completed",
            conversation_id=session.id,
            history_turns=len(session.history),
        )
        return ChatResult(response=reply, history=session.history, conversation_id=session.id)
