from openai import OpenAI

from ragbot.embedding.config import OpenAIEmbeddingConfig
from ragbot.embedding.provider import AbstractEmbeddingProvider, EmbeddingPurpose

# OpenAI caps a request at 2048 inputs and 300k tokens; 500 chunks stays under both
_MAX_INPUTS_PER_REQUEST = 500


class OpenAIEmbeddingProvider(AbstractEmbeddingProvider):
    """OpenAI embeddings; the same vector space serves documents and queries."""

    config: OpenAIEmbeddingConfig

    def __init__(self, config: OpenAIEmbeddingConfig) -> None:
        super().__init__(config)
        self._client = OpenAI(api_key=config.api_key, base_url=config.api_url)

    @property
    def max_batch_size(self) -> int:
        return _MAX_INPUTS_PER_REQUEST

    def _embed_batch(self, texts: list[str], purpose: EmbeddingPurpose) -> list[list[float]]:
        result = self._client.embeddings.create(model=self.config.model, input=texts)
        # The API does not promise input order
        by_position = sorted(result.data, key=lambda item: item.index)
        return [item.embedding for item in by_position]
