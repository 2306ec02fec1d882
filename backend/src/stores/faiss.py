import fcntl
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import faiss
import numpy as np

from config import DEFAULT_MAX_RESULTS, DEFAULT_SIMILARITY_THRESHOLD
from models import ChatMessage, Document, DocumentChunk, SearchResult

from .base import BaseVectorStore, VectorStoreError, serialize_sources

logger = logging.getLogger(__name__)


def _as_unit_matrix(vectors: list[list[float]]) -> np.ndarray:
    matrix = np.array(vectors, dtype=np.float32)
    if matrix.ndim == 1:
        matrix = matrix.reshape(1, -1)
    faiss.normalize_L2(matrix)
    return matrix


class FAISSVectorStore(BaseVectorStore):
    """Local store used when no Supabase project is configured.

    Vectors are L2-normalised into an inner-product index, so scores are
    cosine similarities. Row ``i`` of the index always corresponds to
    ``self._chunks[i]``; documents, chunks and chat messages are persisted
    as JSON next to the index file.
    """

    def __init__(
        self,
        dimension: int,
        index_path: Optional[Path] = None,
        metadata_path: Optional[Path] = None,
        **kwargs: Any,
    ):
        super().__init__(dimension)
        self._index_path = index_path
        self._metadata_path = metadata_path

        self._index: faiss.Index = self._load_index()
        metadata = self._load_metadata()
        self._documents: dict[str, dict[str, Any]] = metadata.get("documents", {})
        self._chunks: list[dict[str, Any]] = metadata.get("chunks", [])
        self._chat_messages: list[dict[str, Any]] = metadata.get("chat_messages", [])

    def _load_index(self) -> faiss.Index:
        if self._index_path and self._index_path.exists():
            return faiss.read_index(str(self._index_path))
        return faiss.IndexFlatIP(self.dimension)

    def _load_metadata(self) -> dict[str, Any]:
        if self._metadata_path and self._metadata_path.exists():
            with open(self._metadata_path, "r") as f:
                return json.load(f)
        return {}

    def _acquire_lock(self) -> None:
        if self._metadata_path:
            self._metadata_path.parent.mkdir(parents=True, exist_ok=True)
            self._lock_file = open(self._metadata_path.with_suffix(".lock"), "w")
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_EX)

    def _release_lock(self) -> None:
        if hasattr(self, "_lock_file"):
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
            self._lock_file.close()
            del self._lock_file

    def save(self) -> None:
        if self._index_path:
            self._index_path.parent.mkdir(parents=True, exist_ok=True)
            faiss.write_index(self._index, str(self._index_path))

        if self._metadata_path:
            self._metadata_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._metadata_path, "w") as f:
                json.dump(
                    {
                        "documents": self._documents,
                        "chunks": self._chunks,
                        "chat_messages": self._chat_messages,
                    },
                    f,
                    indent=2,
                )

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

        document_id = str(uuid.uuid4())
        try:
            self._acquire_lock()
            if embeddings:
                self._index.add(_as_unit_matrix(embeddings))

            self._documents[document_id] = {
                "id": document_id,
                "filename": filename,
                "content": content,
                "file_type": file_type,
                "file_size": file_size,
                "uploaded_at": datetime.now(timezone.utc).isoformat(),
            }
            for index, chunk in enumerate(chunks):
                self._chunks.append(
                    {
                        "id": str(uuid.uuid4()),
                        "document_id": document_id,
                        "content": chunk,
                        "chunk_index": index,
                        "metadata": {"length": len(chunk), "filename": filename},
                    }
                )

            self.save()
        except (AssertionError, OSError, RuntimeError) as e:
            logger.error(f"Error storing document {filename}: {e}", exc_info=True)
            raise VectorStoreError("Failed to store document in vector database") from e
        finally:
            self._release_lock()

        logger.info(f"Stored document {document_id} with {len(chunks)} chunks")
        return document_id

    def search(
        self,
        query_embedding: list[float],
        limit: int = DEFAULT_MAX_RESULTS,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> list[SearchResult]:
        if self._index.ntotal == 0 or limit <= 0:
            return []

        k = min(limit, self._index.ntotal)
        try:
            scores, indices = self._index.search(_as_unit_matrix([query_embedding]), k)
        except (AssertionError, RuntimeError) as e:
            logger.error(f"Error searching similar chunks: {e}", exc_info=True)
            raise VectorStoreError("Failed to search vector database") from e

        results = []
        for score, idx in zip(scores[0], indices[0]):
            if idx < 0 or idx >= len(self._chunks) or score < threshold:
                continue
            row = self._chunks[idx]
            record = self._documents.get(row["document_id"])
            if record is None:
                continue
            results.append(
                SearchResult(
                    chunk=DocumentChunk.from_record(
                        {**row, "embedding": self._index.reconstruct(int(idx)).tolist()}
                    ),
                    similarity=float(score),
                    document=Document.from_record(record),
                )
            )
        return results

    def get_all_documents(self) -> list[Document]:
        documents = [Document.from_record(record) for record in self._documents.values()]
        return sorted(documents, key=lambda doc: doc.uploaded_at, reverse=True)

    def delete_document(self, document_id: str) -> None:
        try:
            self._acquire_lock()
            self._documents.pop(document_id, None)
            kept_indices = [
                i for i, row in enumerate(self._chunks) if row["document_id"] != document_id
            ]
            if len(kept_indices) != len(self._chunks):
                index = faiss.IndexFlatIP(self.dimension)
                if kept_indices:
                    kept_vectors = np.array(
                        [self._index.reconstruct(i) for i in kept_indices], dtype=np.float32
                    )
                    index.add(kept_vectors)
                self._index = index
                self._chunks = [self._chunks[i] for i in kept_indices]

            self.save()
        except (OSError, RuntimeError) as e:
            logger.error(f"Error deleting document {document_id}: {e}", exc_info=True)
            raise VectorStoreError("Failed to delete document") from e
        finally:
            self._release_lock()

    def save_chat_message(self, message: ChatMessage) -> None:
        try:
            self._acquire_lock()
            self._chat_messages.append(
                {
                    "content": message.content,
                    "is_user": message.is_user,
                    "timestamp": message.timestamp.isoformat(),
                    "sources": serialize_sources(message),
                }
            )
            self.save()
        except OSError as e:
            logger.error(f"Error saving chat message: {e}", exc_info=True)
            raise VectorStoreError("Failed to save chat message") from e
        finally:
            self._release_lock()

    @property
    def count(self) -> int:
        return self._index.ntotal
