import vertexai
from vertexai.language_models import TextEmbeddingInput, TextEmbeddingModel

from ragbot.embedding.config import VertexEmbeddingConfig
from ragbot.embedding.provider import AbstractEmbeddingProvider, EmbeddingPurpose

_TASK_TYPES = {
    EmbeddingPurpose.DOCUMENT: "RETRIEVAL_DOCUMENT",
    EmbeddingPurpose.QUERY: "RETRIEVAL_QUERY",
}
_MAX_INSTANCES_PER_REQUEST = 250


class VertexEmbeddingProvider(AbstractEmbeddingProvider):
    config: VertexEmbeddingConfig

    def __init__(self, config: VertexEmbeddingConfig) -> None:
        super().__init__(config)
        vertexai.init(project=config.project_id, location=config.location)
        self._model = TextEmbeddingModel.from_pretrained(config.model)

    @property
    def max_batch_size(self) -> int:
        return _MAX_INSTANCES_PER_REQUEST

    def _embed_batch(self, texts: list[str], purpose: EmbeddingPurpose) -> list[list[float]]:
        task_type = _TASK_TYPES[purpose]
        inputs: list[str | TextEmbeddingInput] = [
            TextEmbeddingInput(text=text, task_type=task_type) for text in texts
        ]
        return [list(embedding.values) for embedding in self._model.get_embeddings(inputs)]
