from dataclasses import dataclass
from enum import StrEnum


class ProviderType(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    VERTEX = "vertex"


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Message:
    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class TextResponse:
    content: str
    usage: TokenUsage
    stop_reason: str | None = None


def split_system_prompt(messages: list[Message]) -> tuple[str, list[dict[str, str]]]:
    """Anthropic-style APIs take system text as a separate parameter."""
    system_parts = [m.content for m in messages if m.role == MessageRole.SYSTEM]
    conversation = [
        {"role": m.role.value, "content": m.content}
        for m in messages
        if m.role != MessageRole.SYSTEM
    ]
    return "\n\n".join(system_parts), conversation
