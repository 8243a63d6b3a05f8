import vertexai
from vertexai.generative_models import Content, GenerationConfig, GenerativeModel, Part

from ragbot.llm.provider.config import VertexConfig
from ragbot.llm.provider.provider import AbstractProvider
from ragbot.llm.provider.types import (
    Message,
    MessageRole,
    ProviderType,
    TextResponse,
    TokenUsage,
)

# Gemini names the assistant side "model"
_GEMINI_ROLES = {MessageRole.USER: "user", MessageRole.ASSISTANT: "model"}


class VertexProvider(AbstractProvider):
    """Gemini models on Google Cloud Vertex AI."""

    config: VertexConfig

    def __init__(self, config: VertexConfig) -> None:
        super().__init__(config)
        vertexai.init(project=config.project_id, location=config.location)
        self._generation_config = GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
        )

    def identify(self) -> ProviderType:
        return ProviderType.VERTEX

    def _complete(self, messages: list[Message]) -> TextResponse:
        instructions = [m.content for m in messages if m.role is MessageRole.SYSTEM]
        model = GenerativeModel(self.config.model, system_instruction=instructions or None)
        contents = [
            Content(role=_GEMINI_ROLES[m.role], parts=[Part.from_text(m.content)])
            for m in messages
            if m.role is not MessageRole.SYSTEM
        ]

        result = model.generate_content(contents, generation_config=self._generation_config)

        candidate = result.candidates[0]
        metadata = result.usage_metadata
        return TextResponse(
            content="".join(part.text for part in candidate.content.parts if part.text),
            usage=TokenUsage(
                input_tokens=metadata.prompt_token_count if metadata else 0,
                output_tokens=metadata.candidates_token_count if metadata else 0,
            ),
            stop_reason=candidate.finish_reason.name,
        )
