import logging
from pathlib import Path
from typing import Any, Iterable

from adapters import BaseEmbedder
from config import (
    get_config_value,
    get_max_file_size,
    get_supported_extensions,
)
from loaders import get_loader_for_file, validate_file
from splitters import BaseTextSplitter, TextSplitter
from stores import BaseVectorStore, VectorStoreError

from .base import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    create_embedder_from_config,
    create_vector_store_from_config,
)
from .utils import guess_file_type

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Upload flow: validate, extract text, chunk, embed, store.

    A failure at any step aborts the upload of that file. Rows already written
    by the store are left in place.
    """

    def __init__(
        self,
        embedder: BaseEmbedder,
        splitter: BaseTextSplitter,
        vector_store: BaseVectorStore,
        max_file_size: int,
        supported_extensions: list[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.embedder = embedder
        self.splitter = splitter
        self.vector_store = vector_store
        self.max_file_size = max_file_size
        self.supported_extensions = supported_extensions
        self.batch_size = batch_size

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        config_path: Path,
        embedder: BaseEmbedder | None = None,
        vector_store: BaseVectorStore | None = None,
    ) -> "IngestionPipeline":
        """Create pipeline from configuration dictionary."""
        embedder = embedder or create_embedder_from_config(config)
        vector_store = vector_store or create_vector_store_from_config(
            config, config_path, embedder
        )

        chunk_size = get_config_value(config, "ingestion.chunk_size", DEFAULT_CHUNK_SIZE)
        chunk_overlap = get_config_value(
            config, "ingestion.chunk_overlap", DEFAULT_CHUNK_OVERLAP
        )

        return cls(
            embedder=embedder,
            splitter=TextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap),
            vector_store=vector_store,
            max_file_size=get_max_file_size(config),
            supported_extensions=get_supported_extensions(config),
            batch_size=get_config_value(config, "ingestion.batch_size", DEFAULT_BATCH_SIZE),
        )

    def validate(self, filename: str, size: int) -> tuple[bool, str]:
        return validate_file(
            filename,
            size,
            max_size=self.max_file_size,
            extensions=self.supported_extensions,
        )

    def extract_text(self, filename: str, data: bytes) -> str:
        loader = get_loader_for_file(filename)
        return loader.load_bytes(filename, data)

    def _embed_chunks(self, chunks: list[str]) -> list[list[float]]:
        embeddings: list[list[float]] = []
        for i in range(0, len(chunks), self.batch_size):
            embeddings.extend(self.embedder.embed_batch(chunks[i : i + self.batch_size]))
        return embeddings

    def ingest_file(
        self,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Ingest one uploaded file and return the new document id.

        Raises:
            ValueError: The file is invalid, unreadable or has no text.
            VectorStoreError: The store rejected the document.
        """
        is_valid, error = self.validate(filename, len(data))
        if not is_valid:
            raise ValueError(error)

        logger.info(f"Processing {filename} ({len(data)} bytes)")
        content = self.extract_text(filename, data)
        chunks = self.splitter.split_text(content)
        if not chunks:
            raise ValueError(f"No text content found in {filename}")

        logger.info(f"Generating embeddings for {len(chunks)} chunks")
        embeddings = self._embed_chunks(chunks)

        document_id = self.vector_store.store_document(
            filename=filename,
            content=content,
            file_type=guess_file_type(filename, content_type),
            file_size=len(data),
            chunks=chunks,
            embeddings=embeddings,
        )
        logger.info(f"Ingested {filename} as document {document_id}")
        return document_id

    def ingest_path(self, file_path: Path) -> str:
        return self.ingest_file(file_path.name, file_path.read_bytes())

    def _discover_files(self, paths: Iterable[Path]) -> list[Path]:
        """Expand directories into their supported files."""
        files: list[Path] = []
        for path in paths:
            if path.is_dir():
                files.extend(
                    sorted(
                        p
                        for p in path.iterdir()
                        if p.is_file() and p.suffix.lower() in self.supported_extensions
                    )
                )
            else:
                files.append(path)
        return files

    def ingest_paths(self, paths: Iterable[Path]) -> dict[str, Any]:
        """Ingest files and directories from disk, continuing past failures."""
        files = self._discover_files(paths)
        documents = 0
        chunks_before = self.vector_store.count
        failed: dict[str, str] = {}

        for file_path in files:
            try:
                self.ingest_path(file_path)
                documents += 1
            except (OSError, ValueError, VectorStoreError) as e:
                logger.warning(f"Failed to ingest {file_path}: {e}")
                failed[str(file_path)] = str(e)

        return {
            "documents": documents,
            "chunks": self.vector_store.count - chunks_before,
            "failed": failed,
        }


def run_ingestion(config_path: Path, paths: list[Path]) -> dict[str, Any]:
    """Run the ingestion pipeline over files and directories.

    Args:
        config_path: Path to configuration file.
        paths: Files or directories to ingest.

    Returns:
        Dictionary with ingestion results.
    """
    from config import load_config

    config = load_config(config_path)
    pipeline = IngestionPipeline.from_config(config, config_path)
    return pipeline.ingest_paths(paths)
