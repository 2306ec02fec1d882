"""Data models for the RAG assistant."""

from .chat import ChatMessage
from .document import Document, DocumentChunk, SearchResult

__all__ = ["ChatMessage", "Document", "DocumentChunk", "SearchResult"]
