import os
from typing import Any, Optional

from openai import OpenAI

from adapters.base import BaseEmbedder
from adapters.utils import create_session_with_pooling

EMBEDDING_DIMENSIONS = {
    "jina-embeddings-v2-base-en": 768,
    "jina-embeddings-v2-small-en": 512,
    "jina-embeddings-v3": 1024,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

JINA_BASE_URL = "https://api.jina.ai/v1/embeddings"
DEFAULT_TIMEOUT = 60


class JinaEmbedder(BaseEmbedder):
    """Jina AI hosted embeddings over plain HTTP."""

    def __init__(
        self,
        model: str = "jina-embeddings-v2-base-en",
        api_key: Optional[str] = None,
        base_url: str = JINA_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        **kwargs: Any,
    ):
        super().__init__(model, **kwargs)
        self.api_key = api_key or os.environ.get("JINA_API_KEY")
        if not self.api_key:
            raise ValueError("JINA_API_KEY environment variable required for Jina provider")

        self.base_url = base_url
        self.timeout = timeout
        self._dimension: Optional[int] = kwargs.get("dimension")
        self.session = create_session_with_pooling()

    @property
    def dimension(self) -> int:
        return self._dimension or EMBEDDING_DIMENSIONS.get(self.model, 768)

    def _post(self, texts: list[str]) -> list[list[float]]:
        response = self.session.post(
            self.base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            json={
                "model": self.model,
                "input": texts,
                "encoding_format": "float",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        items = response.json()["data"]
        items = sorted(
            enumerate(items), key=lambda pair: pair[1].get("index", pair[0])
        )
        return [item["embedding"] for _, item in items]

    def embed(self, text: str) -> list[float]:
        return self._post([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return self._post(texts)


class OpenAIEmbedder(BaseEmbedder):
    """OpenAI embedding provider."""

    def __init__(self, model: str = "text-embedding-3-small", **kwargs: Any):
        api_key = kwargs.pop("api_key", None) or os.environ.get("OPENAI_API_KEY")
        base_url = kwargs.pop("base_url", None)
        super().__init__(model, **kwargs)

        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self._dimension: Optional[int] = kwargs.get("dimension")

    @property
    def dimension(self) -> int:
        return self._dimension or EMBEDDING_DIMENSIONS.get(self.model, 1536)

    def _create_embedding_params(self, input_data: str | list[str]) -> dict[str, Any]:
        """Build parameters for embedding API call."""
        params = {"model": self.model, "input": input_data}
        if self._dimension is not None:
            params["dimensions"] = self._dimension
        return params

    def embed(self, text: str) -> list[float]:
        response = self.client.embeddings.create(**self._create_embedding_params(text))
        return response.data[0].embedding

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        response = self.client.embeddings.create(**self._create_embedding_params(texts))
        return [item.embedding for item in response.data]
