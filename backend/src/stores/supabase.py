import json
import logging
from typing import Any, Optional

from supabase import Client, create_client

from config import DEFAULT_MAX_RESULTS, DEFAULT_SIMILARITY_THRESHOLD
from models import ChatMessage, Document, DocumentChunk, SearchResult

from .base import BaseVectorStore, VectorStoreError, serialize_sources

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE = "documents"
CHUNKS_TABLE = "document_chunks"
CHAT_MESSAGES_TABLE = "chat_messages"


class SupabaseVectorStore(BaseVectorStore):
    """Documents and chunks in Supabase Postgres with pgvector search.

    Similarity search is delegated to a stored procedure (``search_chunks`` by
    default, see ``backend/sql/schema.sql``). Chunk rows are removed by the
    ``ON DELETE CASCADE`` foreign key when their document is deleted.
    """

    def __init__(
        self,
        dimension: int,
        url: Optional[str] = None,
        key: Optional[str] = None,
        match_function: str = "search_chunks",
        client: Optional[Client] = None,
        **kwargs: Any,
    ):
        super().__init__(dimension)
        if client is None:
            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required")
            client = create_client(url, key)
        self.client = client
        self.match_function = match_function

    def store_document(
        self,
        filename: str,
        content: str,
        file_type: str,
        file_size: int,
        chunks: list[str],
        embeddings: list[list[float]],
    ) -> str:
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )

        try:
            result = (
                self.client.table(DOCUMENTS_TABLE)
                .insert(
                    {
                        "filename": filename,
                        "content": content,
                        "file_type": file_type,
                        "file_size": file_size,
                    }
                )
                .execute()
            )
            document_id = str(result.data[0]["id"])

            rows = [
                {
                    "document_id": document_id,
                    "content": chunk,
                    "embedding": embedding,
                    "chunk_index": index,
                    "metadata": {"length": len(chunk), "filename": filename},
                }
                for index, (chunk, embedding) in enumerate(zip(chunks, embeddings))
            ]
            if rows:
                self.client.table(CHUNKS_TABLE).insert(rows).execute()
        except Exception as e:
            logger.error(f"Error storing document {filename}: {e}", exc_info=True)
            raise VectorStoreError("Failed to store document in vector database") from e

        logger.info(f"Stored document {document_id} with {len(rows)} chunks")
        return document_id

    def _fetch_documents(self, document_ids: list[str]) -> dict[str, Document]:
        if not document_ids:
            return {}
        result = (
            self.client.table(DOCUMENTS_TABLE)
            .select("*")
            .in_("id", document_ids)
            .execute()
        )
        return {str(row["id"]): Document.from_record(row) for row in result.data}

    def search(
        self,
        query_embedding: list[float],
        limit: int = DEFAULT_MAX_RESULTS,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> list[SearchResult]:
        try:
            matches = (
                self.client.rpc(
                    self.match_function,
                    {
                        "query_embedding": query_embedding,
                        "match_threshold": threshold,
                        "match_count": limit,
                    },
                )
                .execute()
                .data
                or []
            )
            document_ids = list(dict.fromkeys(str(row["document_id"]) for row in matches))
            documents = self._fetch_documents(document_ids)
        except Exception as e:
            logger.error(f"Error searching similar chunks: {e}", exc_info=True)
            raise VectorStoreError("Failed to search vector database") from e

        results = []
        for row in matches:
            document = documents.get(str(row["document_id"]))
            if document is None:
                continue
            results.append(
                SearchResult(
                    chunk=DocumentChunk.from_record(row),
                    similarity=float(row.get("similarity", 0.0)),
                    document=document,
                )
            )
        return results

    def get_all_documents(self) -> list[Document]:
        try:
            result = (
                self.client.table(DOCUMENTS_TABLE)
                .select("*")
                .order("uploaded_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching documents: {e}", exc_info=True)
            raise VectorStoreError("Failed to fetch documents") from e

        return [Document.from_record(row) for row in result.data]

    def delete_document(self, document_id: str) -> None:
        try:
            self.client.table(DOCUMENTS_TABLE).delete().eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"Error deleting document {document_id}: {e}", exc_info=True)
            raise VectorStoreError("Failed to delete document") from e

    def save_chat_message(self, message: ChatMessage) -> None:
        sources = serialize_sources(message)
        try:
            self.client.table(CHAT_MESSAGES_TABLE).insert(
                {
                    "content": message.content,
                    "is_user": message.is_user,
                    "timestamp": message.timestamp.isoformat(),
                    "sources": json.dumps(sources) if sources else None,
                }
            ).execute()
        except Exception as e:
            logger.error(f"Error saving chat message: {e}", exc_info=True)
            raise VectorStoreError("Failed to save chat message") from e

    @property
    def count(self) -> int:
        try:
            result = (
                self.client.table(CHUNKS_TABLE).select("id", count="exact").limit(1).execute()
            )
        except Exception as e:
            logger.error(f"Error counting chunks: {e}", exc_info=True)
            raise VectorStoreError("Failed to count document chunks") from e
        return result.count or 0
