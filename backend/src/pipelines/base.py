import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

from adapters import (
    BaseEmbedder,
    BaseLLM,
    FallbackEmbedder,
    MockEmbedder,
    VoiceService,
    create_embedder,
    create_llm,
)
from config import (
    API_KEY_ENV_VARS,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_EMBEDDING_DIMENSION,
    DEFAULT_MAX_RESULTS,
    DEFAULT_SIMILARITY_THRESHOLD,
    get_config_value,
    get_storage_dir,
)
from stores import BaseVectorStore, create_vector_store

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_TEMPLATE = """Based on the following context from uploaded documents, please provide a comprehensive and accurate answer to the user's question. If the context doesn't contain relevant information, please state that clearly.

Context:
{context}

Question: {question}

Please provide a helpful response based on the available context:"""

DEFAULT_BATCH_SIZE = 100
DEFAULT_TOP_K = DEFAULT_MAX_RESULTS

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_CHUNK_OVERLAP",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_CONTEXT_TEMPLATE",
    "DEFAULT_SIMILARITY_THRESHOLD",
    "DEFAULT_TOP_K",
    "create_embedder_from_config",
    "create_llm_from_config",
    "create_vector_store_from_config",
    "create_voice_service_from_config",
    "get_vector_store_paths",
]


def _has_api_key(provider: str, section_config: dict[str, Any]) -> bool:
    env_var = API_KEY_ENV_VARS.get(provider)
    if env_var is None:
        return True
    return bool(section_config.get("api_key") or os.environ.get(env_var))


def _create_adapter_from_config(
    config: dict[str, Any],
    section: str,
    create_fn: Callable[..., Any],
    defaults: dict[str, str],
) -> Any:
    """Create an adapter (embedder or LLM) from configuration."""
    section_config = config.get(section, {})
    provider = section_config.get("provider", defaults["provider"])
    model = section_config.get("model", defaults["model"])

    extra_kwargs = {
        k: v
        for k, v in section_config.items()
        if k not in ("provider", "model") and v != ""
    }

    return create_fn(provider, model=model, **extra_kwargs)


def create_embedder_from_config(config: dict[str, Any]) -> BaseEmbedder:
    """Create an embedder instance from configuration.

    Without an API key the deterministic mock embedder is used; otherwise the
    remote embedder is wrapped so failed calls fall back to mock vectors.
    """
    defaults = {"provider": "jina", "model": "jina-embeddings-v2-base-en"}
    section_config = config.get("embedding", {})
    provider = section_config.get("provider", defaults["provider"])
    dimension = section_config.get("dimension", DEFAULT_EMBEDDING_DIMENSION)

    if not _has_api_key(provider, section_config):
        logger.warning(f"{provider} API key not configured, using mock embeddings")
        return MockEmbedder(dimension=dimension)

    embedder = _create_adapter_from_config(config, "embedding", create_embedder, defaults)
    if isinstance(embedder, MockEmbedder):
        return embedder
    return FallbackEmbedder(embedder)


def create_llm_from_config(config: dict[str, Any]) -> Optional[BaseLLM]:
    """Create an LLM instance from configuration, or None without an API key."""
    defaults = {"provider": "gemini", "model": "gemini-1.5-flash"}
    section_config = config.get("llm", {})
    provider = section_config.get("provider", defaults["provider"])

    if not _has_api_key(provider, section_config):
        logger.warning(f"{provider} API key not configured, using mock responses")
        return None

    return _create_adapter_from_config(config, "llm", create_llm, defaults)


def get_vector_store_paths(
    config: dict[str, Any], config_path: Path, embedder_model: str
) -> tuple[Path, Path]:
    """Get index and metadata paths for the local vector store."""
    storage_dir = get_storage_dir(config, config_path)
    embedding_id = embedder_model.replace("/", "_").replace("-", "_")
    return (
        storage_dir / f"faiss_{embedding_id}.index",
        storage_dir / f"faiss_{embedding_id}.json",
    )


def create_vector_store_from_config(
    config: dict[str, Any], config_path: Path, embedder: BaseEmbedder
) -> BaseVectorStore:
    """Create the configured store.

    A Supabase store without a URL or key degrades to the local FAISS store.
    """
    store_config = config.get("vector_store", {})
    provider = store_config.get("provider", "supabase")

    if provider == "supabase":
        url = store_config.get("url") or os.environ.get("SUPABASE_URL")
        key = store_config.get("key") or os.environ.get("SUPABASE_ANON_KEY")
        if url and key:
            return create_vector_store(
                "supabase",
                dimension=embedder.dimension,
                url=url,
                key=key,
                match_function=store_config.get("match_function", "search_chunks"),
            )
        logger.warning("Supabase not configured, using local FAISS vector store")
        provider = "faiss"

    if provider == "faiss":
        index_path, metadata_path = get_vector_store_paths(
            config, config_path, embedder.model
        )
        return create_vector_store(
            "faiss",
            dimension=embedder.dimension,
            index_path=index_path,
            metadata_path=metadata_path,
        )

    return create_vector_store(provider, dimension=embedder.dimension, **store_config)


def create_voice_service_from_config(config: dict[str, Any]) -> VoiceService:
    voice_config = {k: v for k, v in config.get("voice", {}).items() if v != ""}
    return VoiceService(**voice_config)
