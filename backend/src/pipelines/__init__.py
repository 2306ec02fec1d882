from .base import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONTEXT_TEMPLATE,
    DEFAULT_TOP_K,
    create_embedder_from_config,
    create_llm_from_config,
    create_vector_store_from_config,
    create_voice_service_from_config,
    get_vector_store_paths,
)
from .ingestion import IngestionPipeline, run_ingestion
from .retrieval import RetrievalPipeline, generate_mock_response

__all__ = [
    "IngestionPipeline",
    "run_ingestion",
    "RetrievalPipeline",
    "generate_mock_response",
    "create_embedder_from_config",
    "create_llm_from_config",
    "create_vector_store_from_config",
    "create_voice_service_from_config",
    "get_vector_store_paths",
    "DEFAULT_CONTEXT_TEMPLATE",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_CHUNK_OVERLAP",
    "DEFAULT_TOP_K",
]
