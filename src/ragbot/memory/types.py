from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TurnRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def parse(cls, value: str) -> "TurnRole":
        # Older clients send "bot" for assistant replies
        if value == "bot":
            return cls.ASSISTANT
        return cls(value)


@dataclass(frozen=True)
class ConversationTurn:
    role: TurnRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ConversationTurn":
        return cls(role=TurnRole.parse(str(raw["role"])), content=str(raw["content"]))


@dataclass
class Session:
    id: str
    history: list[ConversationTurn] = field(default_factory=list)
    expires_at: datetime | None = None  # set on commit

    def append(self, turn: ConversationTurn) -> None:
        self.history.append(turn)
