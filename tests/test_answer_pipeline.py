from unittest.mock import MagicMock

import pytest

from ragbot.errors import InvalidQuestionError, LLMError, RetrievalError
from ragbot.knowledge.types import KnowledgeChunk, RetrievalResult
from ragbot.llm.provider.types import MessageRole, TextResponse, TokenUsage
from ragbot.memory.config import MemoryConfig
from ragbot.memory.types import ConversationTurn, TurnRole
from ragbot.pipeline.answer import CONTEXT_DELIMITER, AnswerPipeline, combine_documents
from ragbot.pipeline.prompts import PromptTemplates

_STANDALONE = "standalone: {question} | history: {conversation_history}"
_ANSWER = "context: {context} | history: {conversation_history} | question: {question}"


def _response(content: str) -> TextResponse:
    return TextResponse(content=content, usage=TokenUsage(input_tokens=1, output_tokens=1))


def _result(content: str, score: float = 0.5) -> RetrievalResult:
    chunk = KnowledgeChunk(content=content, source_path="kb.txt", chunk_index=1, total_chunks=1)
    return RetrievalResult(chunk=chunk, score=score)


def _make_pipeline(
    replies: list[str] | None = None,
    results: list[RetrievalResult] | None = None,
) -> tuple[AnswerPipeline, MagicMock, MagicMock]:
    provider = MagicMock()
    provider.complete.side_effect = [_response(r) for r in (replies or ["standalone q", "answer"])]
    vector_store = MagicMock()
    vector_store.retrieve.return_value = results if results is not None else [_result("doc")]
    pipeline = AnswerPipeline(
        provider=provider,
        vector_store=vector_store,
        prompts=PromptTemplates(standalone_question=_STANDALONE, answer=_ANSWER),
        memory_config=MemoryConfig(max_history_tokens=0),
    )
    return pipeline, provider, vector_store


def _prompt_of(provider: MagicMock, call: int) -> str:
    messages = provider.complete.call_args_list[call][0][0]
    assert len(messages) == 1
    assert messages[0].role is MessageRole.USER
    return str(messages[0].content)


class TestCombineDocuments:
    def test_joins_in_rank_order(self) -> None:
        assert combine_documents([_result("a"), _result("b")]) == f"a{CONTEXT_DELIMITER}b"

    def test_empty_results(self) -> None:
        assert combine_documents([]) == ""


class TestAnswerPipeline:
    def test_runs_condense_retrieve_answer(self) -> None:
        pipeline, provider, vector_store = _make_pipeline(
            replies=["What does Pro cost?", "Pro costs less yearly."],
            results=[_result("Pricing doc"), _result("Billing doc")],
        )

        reply = pipeline.answer("how much?", [])

        assert reply == "Pro costs less yearly."
        assert provider.complete.call_count == 2
        vector_store.retrieve.assert_called_once_with("What does Pro cost?", k=3)
        assert "standalone: how much?" in _prompt_of(provider, 0)
        assert "context: Pricing doc\n\nBilling doc" in _prompt_of(provider, 1)

    def test_answer_prompt_uses_original_question(self) -> None:
        pipeline, provider, _ = _make_pipeline(replies=["rewritten question", "answer"])

        pipeline.answer("original question", [])

        answer_prompt = _prompt_of(provider, 1)
        assert "question: original question" in answer_prompt
        assert "rewritten question" not in answer_prompt

    def test_history_rendered_into_both_prompts(self) -> None:
        pipeline, provider, _ = _make_pipeline()
        history = [
            ConversationTurn(role=TurnRole.USER, content="Tell me about Pro"),
            ConversationTurn(role=TurnRole.ASSISTANT, content="Pro unlocks every course."),
        ]

        pipeline.answer("and the price?", history)

        expected = "user: Tell me about Pro\nassistant: Pro unlocks every course."
        assert f"history: {expected}" in _prompt_of(provider, 0)
        assert f"history: {expected}" in _prompt_of(provider, 1)

    def test_history_capped_by_max_turns(self) -> None:
        provider = MagicMock()
        provider.complete.side_effect = [_response("q"), _response("a")]
        vector_store = MagicMock()
        vector_store.retrieve.return_value = []
        pipeline = AnswerPipeline(
            provider=provider,
            vector_store=vector_store,
            prompts=PromptTemplates(standalone_question=_STANDALONE, answer=_ANSWER),
            memory_config=MemoryConfig(max_turns=1, max_history_tokens=0),
        )
        history = [
            ConversationTurn(role=TurnRole.USER, content="old"),
            ConversationTurn(role=TurnRole.ASSISTANT, content="newest"),
        ]

        pipeline.answer("q", history)

        assert "history: assistant: newest |" in _prompt_of(provider, 0)

    def test_empty_retrieval_still_answers(self) -> None:
        pipeline, provider, _ = _make_pipeline(
            replies=["q", "I'm sorry, I don't know the answer to that."], results=[]
        )

        reply = pipeline.answer("Who won the 1987 World Series?", [])

        assert reply == "I'm sorry, I don't know the answer to that."
        assert "context:  |" in _prompt_of(provider, 1)

    def test_empty_rewrite_falls_back_to_question(self) -> None:
        pipeline, _, vector_store = _make_pipeline(replies=["   ", "answer"])

        pipeline.answer("raw question", [])

        vector_store.retrieve.assert_called_once_with("raw question", k=3)

    def test_custom_top_k(self) -> None:
        provider = MagicMock()
        provider.complete.side_effect = [_response("q"), _response("a")]
        vector_store = MagicMock()
        vector_store.retrieve.return_value = []
        pipeline = AnswerPipeline(provider, vector_store, PromptTemplates(), top_k=5)

        pipeline.answer("question", [])

        assert vector_store.retrieve.call_args.kwargs["k"] == 5

    @pytest.mark.parametrize("question", ["", "   ", None])
    def test_invalid_question_makes_no_calls(self, question: str | None) -> None:
        pipeline, provider, vector_store = _make_pipeline()

        with pytest.raises(InvalidQuestionError):
            pipeline.answer(question, [])  # type: ignore[arg-type]

        provider.complete.assert_not_called()
        vector_store.retrieve.assert_not_called()

    def test_condense_failure_aborts(self) -> None:
        pipeline, provider, vector_store = _make_pipeline()
        provider.complete.side_effect = LLMError("timeout")

        with pytest.raises(LLMError):
            pipeline.answer("question", [])
        vector_store.retrieve.assert_not_called()

    def test_retrieval_failure_aborts_before_answer(self) -> None:
        pipeline, provider, vector_store = _make_pipeline()
        vector_store.retrieve.side_effect = RetrievalError("down")

        with pytest.raises(RetrievalError):
            pipeline.answer("question", [])
        assert provider.complete.call_count == 1

    def test_answer_failure_propagates(self) -> None:
        pipeline, provider, _ = _make_pipeline()
        provider.complete.side_effect = [_response("q"), LLMError("overloaded")]

        with pytest.raises(LLMError, match="overloaded"):
            pipeline.answer("question", [])
