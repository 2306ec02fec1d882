from typing import Any

from .base import BaseVectorStore, VectorStoreError


def create_vector_store(
    provider: str,
    dimension: int,
    **kwargs: Any,
) -> BaseVectorStore:
    """Create a vector store instance based on provider.

    Args:
        provider: Provider name ("supabase" or "faiss")
        dimension: Embedding dimension
        **kwargs: Additional provider-specific parameters

    Returns:
        BaseVectorStore instance
    """
    if provider == "supabase":
        from .supabase import SupabaseVectorStore

        return SupabaseVectorStore(dimension=dimension, **kwargs)
    elif provider == "faiss":
        from .faiss import FAISSVectorStore

        return FAISSVectorStore(dimension=dimension, **kwargs)
    else:
        raise ValueError(f"Unknown vector store provider: {provider}")


__all__ = ["BaseVectorStore", "VectorStoreError", "create_vector_store"]
