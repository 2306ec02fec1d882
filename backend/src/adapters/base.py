from abc import ABC, abstractmethod
from typing import Any


class BaseEmbedder(ABC):
    """Maps text to fixed-length vectors.

    Every vector an embedder returns has exactly ``dimension`` components;
    the vector store is created with the same dimension.
    """

    def __init__(self, model: str, **kwargs: Any):
        self.model = model
        self.kwargs = kwargs

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        pass

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts, one vector per input in input order."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r}, dimension={self.dimension})"


class BaseLLM(ABC):
    """Text completion provider used to answer questions over retrieved context."""

    def __init__(self, model: str, **kwargs: Any):
        self.model = model
        self.kwargs = kwargs

    @abstractmethod
    def generate(self, prompt: str, **kwargs: Any) -> str:
        """Complete a single prompt. Sampling settings may be overridden per call."""
        pass

    @abstractmethod
    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        """Complete a conversation of ``{"role", "content"}`` messages."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
