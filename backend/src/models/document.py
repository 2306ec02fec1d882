"""Document data models for the RAG assistant."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class DocumentChunk(BaseModel):
    """A bounded slice of a document's text, the unit stored and retrieved.

    Attributes:
        id: Chunk identifier assigned by the store.
        document_id: Identifier of the parent document.
        content: The chunk text.
        embedding: Fixed-dimension embedding vector (may be empty when the
            store does not return vectors).
        chunk_index: Position of the chunk within its document.
        metadata: Free-form metadata (e.g. ``length``, ``filename``).
    """

    id: str
    document_id: str
    content: str
    embedding: list[float] = Field(default_factory=list)
    chunk_index: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "DocumentChunk":
        embedding = record.get("embedding") or []
        if isinstance(embedding, str):
            # pgvector columns come back as "[0.1,0.2,...]"
            embedding = [float(v) for v in embedding.strip("[]").split(",") if v]
        return cls(
            id=str(record["id"]),
            document_id=str(record["document_id"]),
            content=record.get("content", ""),
            embedding=embedding,
            chunk_index=record.get("chunk_index", 0),
            metadata=record.get("metadata") or {},
        )


class Document(BaseModel):
    """An uploaded document as held by the remote store."""

    id: str
    filename: str
    content: str = ""
    file_type: str = ""
    size: int = 0
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    chunks: list[DocumentChunk] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Document":
        uploaded_at = record.get("uploaded_at")
        return cls(
            id=str(record["id"]),
            filename=record.get("filename", ""),
            content=record.get("content") or "",
            file_type=record.get("file_type") or "",
            size=record.get("file_size") or 0,
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
        )


class SearchResult(BaseModel):
    """A retrieved chunk paired with its similarity and parent document."""

    chunk: DocumentChunk
    similarity: float
    document: Optional[Document] = None
