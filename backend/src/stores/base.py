from abc import ABC, abstractmethod
from typing import Any

from config import DEFAULT_MAX_RESULTS, DEFAULT_SIMILARITY_THRESHOLD
from models import ChatMessage, Document, SearchResult


class VectorStoreError(RuntimeError):
    """A vector store operation failed; the cause is chained."""


class BaseVectorStore(ABC):
    """Abstract base class for document/chunk stores with similarity search."""

    def __init__(self, dimension: int, **kwargs: Any):
        self.dimension = dimension

    @abstractmethod
    def store_document(
        self,
        filename: str,
        content: str,
        file_type: str,
        file_size: int,
        chunks: list[str],
        embeddings: list[list[float]],
    ) -> str:
        """Persist a document and its embedded chunks. Returns the document id."""
        pass

    @abstractmethod
    def search(
        self,
        query_embedding: list[float],
        limit: int = DEFAULT_MAX_RESULTS,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> list[SearchResult]:
        """Return up to ``limit`` chunks with similarity >= ``threshold``."""
        pass

    @abstractmethod
    def get_all_documents(self) -> list[Document]:
        """All documents, most recently uploaded first."""
        pass

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """Delete a document together with its chunks."""
        pass

    @abstractmethod
    def save_chat_message(self, message: ChatMessage) -> None:
        pass

    @property
    @abstractmethod
    def count(self) -> int:
        """Return the number of stored chunks."""
        pass


def serialize_sources(message: ChatMessage) -> list[dict[str, Any]] | None:
    """Chat message sources without their embedding vectors."""
    if not message.sources:
        return None
    return [source.model_dump(mode="json", exclude={"embedding"}) for source in message.sources]
