from pathlib import Path
from typing import Any

import pytest

from adapters import MockEmbedder
from adapters.base import BaseLLM
from stores.faiss import FAISSVectorStore


class StubLLM(BaseLLM):
    """LLM stub that records prompts."""

    def __init__(self, model: str = "stub-llm", reply: str = "Stub response", **kwargs: Any):
        super().__init__(model, **kwargs)
        self.reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        return self.reply

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        return self.reply


def word_count(text: str, model: str = "") -> int:
    """Token counter stand-in that needs no tokenizer download."""
    return len(text.split())


@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder(dimension=32)


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def temp_storage_dir(tmp_path: Path) -> Path:
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return storage_dir


@pytest.fixture
def temp_vector_store(
    temp_storage_dir: Path, mock_embedder: MockEmbedder
) -> FAISSVectorStore:
    index_path = temp_storage_dir / "test.index"
    metadata_path = temp_storage_dir / "test.json"
    return FAISSVectorStore(
        dimension=mock_embedder.dimension,
        index_path=index_path,
        metadata_path=metadata_path,
    )


@pytest.fixture
def clear_api_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "JINA_API_KEY",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    config_content = """
[app]
show_landing = false

[embedding]
provider = "jina"
model = "jina-embeddings-v2-base-en"
api_key = "${JINA_API_KEY:-}"
dimension = 32

[llm]
provider = "gemini"
model = "gemini-1.5-flash"
api_key = "${GEMINI_API_KEY:-}"

[vector_store]
provider = "supabase"
url = "${SUPABASE_URL:-}"
key = "${SUPABASE_ANON_KEY:-}"

[storage]
directory = "storage"

[ingestion]
chunk_size = 200
chunk_overlap = 50
max_file_size_mb = 1
supported_extensions = [".txt", ".md", ".pdf", ".docx"]

[retrieval]
top_k = 3
similarity_threshold = 0.5
"""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_content)
    return config_path
