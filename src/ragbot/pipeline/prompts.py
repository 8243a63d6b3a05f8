import string
from dataclasses import dataclass
from pathlib import Path

from ragbot.errors import ConfigError
from ragbot.util import PROJECT_ROOT, load_yaml_config

DEFAULT_PROMPTS_PATH = PROJECT_ROOT / "config" / "prompts.yaml"

DEFAULT_SUPPORT_CONTACT = "help@scrimba.com"

DEFAULT_STANDALONE_TEMPLATE = (
    "Given some conversation history (if any) and a question, "
    "convert the question to a standalone question.\n"
    "conversation history: {conversation_history}\n"
    "question: {question}\n"
    "standalone question:"
)

DEFAULT_ANSWER_TEMPLATE = (
    "You are a helpful and enthusiastic support bot who can answer a given question "
    "based on the context provided and the conversation history provided. "
    "Try to find the answer in the context. If the answer is not given in the context, "
    "find the answer in the conversation history if possible. "
    "If you really don't know the answer, say \"I'm sorry, I don't know the answer to that.\" "
    "And direct the questioner to email {support_contact}. "
    "Don't try to make up an answer. Always speak as if you were chatting to a friend.\n"
    "context: {context}\n"
    "conversation history: {conversation_history}\n"
    "question: {question}\n"
    "answer:"
)

_STANDALONE_FIELDS = {"conversation_history", "question"}
_ANSWER_FIELDS = {"context", "conversation_history", "question", "support_contact"}


def _placeholders(template: str) -> set[str]:
    return {name for _, name, _, _ in string.Formatter().parse(template) if name}


def _check(name: str, template: str, required: set[str], allowed: set[str]) -> None:
    found = _placeholders(template)
    if missing := required - found:
        raise ConfigError(f"Prompt {name!r} is missing placeholders: {sorted(missing)}")
    if unknown := found - allowed:
        raise ConfigError(f"Prompt {name!r} has unknown placeholders: {sorted(unknown)}")


@dataclass(frozen=True)
class PromptTemplates:
    standalone_question: str = DEFAULT_STANDALONE_TEMPLATE
    answer: str = DEFAULT_ANSWER_TEMPLATE
    support_contact: str = DEFAULT_SUPPORT_CONTACT

    def __post_init__(self) -> None:
        _check("standalone_question", self.standalone_question, {"question"}, _STANDALONE_FIELDS)
        _check("answer", self.answer, {"context", "question"}, _ANSWER_FIELDS)

    def render_standalone(self, question: str, conversation_history: str) -> str:
        return self.standalone_question.format(
            question=question,
            conversation_history=conversation_history,
        )

    def render_answer(self, question: str, context: str, conversation_history: str) -> str:
        return self.answer.format(
            question=question,
            context=context,
            conversation_history=conversation_history,
            support_contact=self.support_contact,
        )


def load_prompts(path: Path = DEFAULT_PROMPTS_PATH) -> PromptTemplates:
    raw = load_yaml_config(path)
    return PromptTemplates(
        standalone_question=raw.get("standalone_question") or DEFAULT_STANDALONE_TEMPLATE,
        answer=raw.get("answer") or DEFAULT_ANSWER_TEMPLATE,
        support_contact=raw.get("support_contact") or DEFAULT_SUPPORT_CONTACT,
    )
