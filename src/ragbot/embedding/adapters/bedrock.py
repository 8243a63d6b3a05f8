import json
from typing import Any

import boto3  # type: ignore[import-untyped]

from ragbot.embedding.config import BedrockEmbeddingConfig
from ragbot.embedding.provider import AbstractEmbeddingProvider, EmbeddingPurpose

_COHERE_INPUT_TYPES = {
    EmbeddingPurpose.DOCUMENT: "search_document",
    EmbeddingPurpose.QUERY: "search_query",
}
_COHERE_MAX_TEXTS = 96


class BedrockEmbeddingProvider(AbstractEmbeddingProvider):
    """Bedrock embeddings.

    Titan models take a single ``inputText`` per call. Cohere models take a
    list of ``texts`` and an ``input_type`` naming what is being embedded.
    """

    config: BedrockEmbeddingConfig

    def __init__(self, config: BedrockEmbeddingConfig) -> None:
        super().__init__(config)
        self._client = boto3.client("bedrock-runtime", region_name=config.region)

    @property
    def _single_input(self) -> bool:
        return self.config.model.startswith("amazon.titan")

    @property
    def max_batch_size(self) -> int:
        return 1 if self._single_input else _COHERE_MAX_TEXTS

    def _request_body(self, texts: list[str], purpose: EmbeddingPurpose) -> dict[str, Any]:
        if self._single_input:
            return {"inputText": texts[0]}
        return {"texts": texts, "input_type": _COHERE_INPUT_TYPES[purpose]}

    def _embed_batch(self, texts: list[str], purpose: EmbeddingPurpose) -> list[list[float]]:
        raw = self._client.invoke_model(
            modelId=self.config.model,
            body=json.dumps(self._request_body(texts, purpose)),
        )
        payload = json.loads(raw["body"].read())

        if self._single_input:
            return [payload["embedding"]]
        return list(payload.get("embeddings", []))
