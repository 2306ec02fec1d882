"""Deterministic stand-ins used when a provider is unconfigured or failing."""

import logging
from typing import Any

import numpy as np
import openai
import requests

from adapters.base import BaseEmbedder

logger = logging.getLogger(__name__)

DEFAULT_MOCK_DIMENSION = 768

# Failures at a remote-call boundary that degrade to a mock result.
FALLBACK_ERRORS = (
    requests.exceptions.RequestException,
    openai.OpenAIError,
    KeyError,
    IndexError,
    TypeError,
    ValueError,
)


def string_hash(text: str) -> int:
    """32-bit signed rolling hash (h = h * 31 + code) over UTF-16 code units.

    Characters outside the BMP contribute their two surrogate units.
    """
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for i in range(0, len(encoded), 2):
        code_unit = int.from_bytes(encoded[i : i + 2], "little")
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def mock_embedding(text: str, dimension: int = DEFAULT_MOCK_DIMENSION) -> list[float]:
    """Unit-length vector seeded by the text hash.

    Component i is sin(h + i) * cos(h - i).
    """
    seed = string_hash(text)
    positions = np.arange(dimension, dtype=np.float64)
    vector = np.sin(seed + positions) * np.cos(seed - positions)
    magnitude = np.linalg.norm(vector)
    if magnitude == 0:
        return vector.tolist()
    return (vector / magnitude).tolist()


class MockEmbedder(BaseEmbedder):
    """Embedder that never leaves the process."""

    def __init__(
        self,
        model: str = "mock-embedder",
        dimension: int = DEFAULT_MOCK_DIMENSION,
        **kwargs: Any,
    ):
        super().__init__(model, **kwargs)
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        return mock_embedding(text, self._dimension)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [mock_embedding(text, self._dimension) for text in texts]


class FallbackEmbedder(BaseEmbedder):
    """Wraps a remote embedder and substitutes mock vectors when it fails."""

    def __init__(self, primary: BaseEmbedder):
        super().__init__(primary.model)
        self.primary = primary
        self.fallback = MockEmbedder(dimension=primary.dimension)

    @property
    def dimension(self) -> int:
        return self.primary.dimension

    def embed(self, text: str) -> list[float]:
        try:
            return self.primary.embed(text)
        except FALLBACK_ERRORS as e:
            logger.error(f"Error generating embedding, using mock embedding: {e}")
            return self.fallback.embed(text)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            return self.primary.embed_batch(texts)
        except FALLBACK_ERRORS as e:
            logger.error(f"Error generating embeddings, using mock embeddings: {e}")
            return self.fallback.embed_batch(texts)
