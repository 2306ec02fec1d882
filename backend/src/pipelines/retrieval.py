import logging
from pathlib import Path
from typing import Any, Callable, Optional

import tiktoken

from adapters import BaseEmbedder, BaseLLM
from adapters.mock import FALLBACK_ERRORS
from config import get_config_value
from models import DocumentChunk, SearchResult
from stores import BaseVectorStore

from .base import (
    DEFAULT_CONTEXT_TEMPLATE,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_TOP_K,
    create_embedder_from_config,
    create_llm_from_config,
    create_vector_store_from_config,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONTEXT_TOKENS = 4096
MOCK_SUMMARY_CHARS = 300
SOURCE_SEPARATOR = "\n\n---\n\n"
ENCODING_CACHE: dict[str, tiktoken.Encoding] = {}


def get_tokenizer(model: str) -> tiktoken.Encoding:
    if model not in ENCODING_CACHE:
        try:
            ENCODING_CACHE[model] = tiktoken.encoding_for_model(model)
        except KeyError:
            ENCODING_CACHE[model] = tiktoken.get_encoding("cl100k_base")
    return ENCODING_CACHE[model]


def count_tokens(text: str, model: str = "gpt-4") -> int:
    encoder = get_tokenizer(model)
    return len(encoder.encode(text))


def generate_mock_response(query: str, chunks: list[DocumentChunk]) -> str:
    """Templated answer that echoes the retrieved text."""
    if not chunks:
        return (
            "I don't have any relevant information in the uploaded documents to "
            f'answer your question about "{query}". Please upload some documents '
            "first or try a different question."
        )

    context_text = "\n\n".join(chunk.content for chunk in chunks)
    summary = context_text[:MOCK_SUMMARY_CHARS]
    if len(context_text) > MOCK_SUMMARY_CHARS:
        summary += "..."

    plural = "s" if len(chunks) > 1 else ""
    return (
        f'Based on the uploaded documents, here\'s what I found regarding "{query}":'
        f"\n\n{summary}\n\n"
        f"This information comes from {len(chunks)} relevant section{plural} in your "
        "uploaded documents. For more detailed information, you might want to ask "
        "more specific questions about particular aspects."
    )


class RetrievalPipeline:
    """Chat flow: embed the question, search the store, generate an answer.

    Without an LLM, or when the LLM call fails, the answer comes from
    ``generate_mock_response``. Search failures propagate as
    ``VectorStoreError``.
    """

    def __init__(
        self,
        embedder: BaseEmbedder,
        llm: Optional[BaseLLM],
        vector_store: BaseVectorStore,
        top_k: int = DEFAULT_TOP_K,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        context_template: str = DEFAULT_CONTEXT_TEMPLATE,
        max_context_tokens: int = DEFAULT_MAX_CONTEXT_TOKENS,
        token_counter: Callable[[str, str], int] = count_tokens,
    ):
        self.embedder = embedder
        self.llm = llm
        self.vector_store = vector_store
        self.top_k = top_k
        self.similarity_threshold = similarity_threshold
        self.context_template = context_template
        self.max_context_tokens = max_context_tokens
        self.token_counter = token_counter

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        config_path: Path,
        embedder: BaseEmbedder | None = None,
        vector_store: BaseVectorStore | None = None,
    ) -> "RetrievalPipeline":
        """Create pipeline from configuration dictionary."""
        embedder = embedder or create_embedder_from_config(config)
        vector_store = vector_store or create_vector_store_from_config(
            config, config_path, embedder
        )

        return cls(
            embedder=embedder,
            llm=create_llm_from_config(config),
            vector_store=vector_store,
            top_k=get_config_value(config, "retrieval.top_k", DEFAULT_TOP_K),
            similarity_threshold=get_config_value(
                config, "retrieval.similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD
            ),
            context_template=get_config_value(
                config, "retrieval.context_template", DEFAULT_CONTEXT_TEMPLATE
            ),
            max_context_tokens=get_config_value(
                config, "retrieval.max_context_tokens", DEFAULT_MAX_CONTEXT_TOKENS
            ),
        )

    def retrieve(
        self,
        query: str,
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> list[SearchResult]:
        """Retrieve relevant chunks for a query."""
        logger.info(f"Embedding query: {query[:50]}...")
        query_embedding = self.embedder.embed(query)

        results = self.vector_store.search(
            query_embedding,
            limit=self.top_k if top_k is None else top_k,
            threshold=self.similarity_threshold if threshold is None else threshold,
        )
        logger.info(f"Found {len(results)} results")
        return results

    def build_prompt(self, query: str, results: list[SearchResult]) -> str:
        """Fill the context template, dropping sources past the token budget."""
        model = getattr(self.llm, "model", "gpt-4")
        template_overhead = self.token_counter(
            self.context_template.format(context="", question=query), model
        )
        available_tokens = self.max_context_tokens - template_overhead

        blocks: list[str] = []
        current_tokens = 0
        for result in results:
            filename = result.document.filename if result.document else "Document"
            block = f"Source: {filename}\n{result.chunk.content}"
            block_tokens = self.token_counter(block, model)

            if current_tokens + block_tokens > available_tokens:
                logger.warning(
                    f"Context truncated to {current_tokens} tokens (limit: {self.max_context_tokens})"
                )
                break
            blocks.append(block)
            current_tokens += block_tokens

        return self.context_template.format(
            context=SOURCE_SEPARATOR.join(blocks),
            question=query,
        )

    def generate(self, query: str, results: list[SearchResult]) -> str:
        """Generate a response using retrieved context."""
        chunks = [result.chunk for result in results]
        if self.llm is None:
            return generate_mock_response(query, chunks)

        prompt = self.build_prompt(query, results)
        logger.info("Generating response...")
        try:
            return self.llm.generate(prompt)
        except FALLBACK_ERRORS as e:
            logger.error(f"Error generating LLM response, using mock response: {e}")
            return generate_mock_response(query, chunks)

    def query(self, query: str) -> dict[str, Any]:
        """Execute a full RAG query: retrieve and generate."""
        results = self.retrieve(query)
        response = self.generate(query, results)

        return {"response": response, "sources": results}
