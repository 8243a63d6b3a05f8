from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ragbot.memory.types import ConversationTurn, TurnRole


class TurnModel(BaseModel):
    role: Literal["user", "assistant", "bot"]
    content: str

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(role=TurnRole.parse(self.role), content=self.content)

    @classmethod
    def from_turn(cls, turn: ConversationTurn) -> "TurnModel":
        return cls(role=turn.role.value, content=turn.content)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional at the schema level so a missing question reaches ChatService,
    # which rejects it before any model call.
    user_question: str | None = Field(default=None, alias="userQuestion")
    history: list[TurnModel] | None = None
    conversation_id: str | None = Field(default=None, alias="conversationId", max_length=128)


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    history: list[TurnModel]
    conversation_id: str = Field(alias="conversationId")


class InitResponse(BaseModel):
    message: str
    chunks: int
