import json
from unittest.mock import MagicMock

import pytest

from models import ChatMessage, DocumentChunk
from stores import VectorStoreError, create_vector_store
from stores.supabase import SupabaseVectorStore


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(mock_client: MagicMock) -> SupabaseVectorStore:
    return SupabaseVectorStore(dimension=3, client=mock_client)


def document_row(document_id: str = "doc-1", filename: str = "notes.txt") -> dict:
    return {
        "id": document_id,
        "filename": filename,
        "content": "Full text.",
        "file_type": "text/plain",
        "file_size": 2048,
        "uploaded_at": "2024-03-04T09:15:00+00:00",
    }


class TestSupabaseVectorStore:
    def test_requires_credentials_without_client(self) -> None:
        with pytest.raises(ValueError):
            SupabaseVectorStore(dimension=3)

    def test_store_document_inserts_document_then_chunks(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        documents_table = MagicMock()
        documents_table.insert.return_value.execute.return_value.data = [{"id": "doc-1"}]
        chunks_table = MagicMock()
        mock_client.table.side_effect = lambda name: {
            "documents": documents_table,
            "document_chunks": chunks_table,
        }[name]

        document_id = store.store_document(
            filename="notes.txt",
            content="One. Two.",
            file_type="text/plain",
            file_size=9,
            chunks=["One.", "Two."],
            embeddings=[[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]],
        )

        assert document_id == "doc-1"
        documents_table.insert.assert_called_once_with(
            {
                "filename": "notes.txt",
                "content": "One. Two.",
                "file_type": "text/plain",
                "file_size": 9,
            }
        )
        rows = chunks_table.insert.call_args[0][0]
        assert [row["chunk_index"] for row in rows] == [0, 1]
        assert rows[1] == {
            "document_id": "doc-1",
            "content": "Two.",
            "embedding": [0.4, 0.5, 0.6],
            "chunk_index": 1,
            "metadata": {"length": 4, "filename": "notes.txt"},
        }

    def test_store_document_failure_raises_store_error(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        mock_client.table.return_value.insert.return_value.execute.side_effect = Exception(
            "permission denied"
        )

        with pytest.raises(VectorStoreError, match="Failed to store document"):
            store.store_document("a.txt", "A.", "text/plain", 2, ["A."], [[1.0, 0.0, 0.0]])

    def test_search_calls_rpc_and_attaches_documents(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        mock_client.rpc.return_value.execute.return_value.data = [
            {
                "id": "chunk-1",
                "document_id": "doc-1",
                "content": "Relevant text.",
                "embedding": "[0.1,0.2,0.3]",
                "chunk_index": 2,
                "metadata": {"length": 14},
                "similarity": 0.91,
            },
            {
                "id": "chunk-2",
                "document_id": "doc-gone",
                "content": "Orphan.",
                "embedding": "[0.3,0.2,0.1]",
                "chunk_index": 0,
                "metadata": {},
                "similarity": 0.8,
            },
        ]
        select = mock_client.table.return_value.select.return_value
        select.in_.return_value.execute.return_value.data = [document_row()]

        results = store.search([0.1, 0.2, 0.3], limit=5, threshold=0.7)

        mock_client.rpc.assert_called_once_with(
            "search_chunks",
            {"query_embedding": [0.1, 0.2, 0.3], "match_threshold": 0.7, "match_count": 5},
        )
        select.in_.assert_called_once_with("id", ["doc-1", "doc-gone"])
        assert len(results) == 1
        assert results[0].similarity == pytest.approx(0.91)
        assert results[0].chunk.embedding == [0.1, 0.2, 0.3]
        assert results[0].chunk.chunk_index == 2
        assert results[0].document.filename == "notes.txt"

    def test_search_without_matches(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        mock_client.rpc.return_value.execute.return_value.data = []

        assert store.search([0.1, 0.2, 0.3]) == []
        mock_client.table.assert_not_called()

    def test_search_failure_raises_store_error(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        mock_client.rpc.return_value.execute.side_effect = Exception("function not found")

        with pytest.raises(VectorStoreError, match="Failed to search vector database"):
            store.search([0.1, 0.2, 0.3])

    def test_get_all_documents_newest_first(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        query = mock_client.table.return_value.select.return_value.order
        query.return_value.execute.return_value.data = [
            document_row("doc-2", "b.md"),
            document_row("doc-1", "a.txt"),
        ]

        documents = store.get_all_documents()

        query.assert_called_once_with("uploaded_at", desc=True)
        assert [doc.id for doc in documents] == ["doc-2", "doc-1"]
        assert documents[0].size == 2048

    def test_delete_document(self, store: SupabaseVectorStore, mock_client: MagicMock) -> None:
        store.delete_document("doc-1")

        mock_client.table.assert_called_with("documents")
        mock_client.table.return_value.delete.return_value.eq.assert_called_once_with(
            "id", "doc-1"
        )

    def test_delete_failure_raises_store_error(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        mock_client.table.return_value.delete.return_value.eq.return_value.execute.side_effect = (
            Exception("timeout")
        )

        with pytest.raises(VectorStoreError, match="Failed to delete document"):
            store.delete_document("doc-1")

    def test_save_chat_message_serializes_sources(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        chunk = DocumentChunk(
            id="chunk-1", document_id="doc-1", content="Text.", embedding=[0.1, 0.2, 0.3]
        )
        message = ChatMessage(content="Answer", is_user=False, sources=[chunk])

        store.save_chat_message(message)

        mock_client.table.assert_called_with("chat_messages")
        row = mock_client.table.return_value.insert.call_args[0][0]
        assert row["content"] == "Answer"
        assert row["is_user"] is False
        sources = json.loads(row["sources"])
        assert sources[0]["content"] == "Text."
        assert "embedding" not in sources[0]

    def test_count(self, store: SupabaseVectorStore, mock_client: MagicMock) -> None:
        select = mock_client.table.return_value.select
        select.return_value.limit.return_value.execute.return_value.count = 7

        assert store.count == 7
        select.assert_called_once_with("id", count="exact")

    def test_count_failure_raises_store_error(
        self, store: SupabaseVectorStore, mock_client: MagicMock
    ) -> None:
        select = mock_client.table.return_value.select
        select.return_value.limit.return_value.execute.side_effect = RuntimeError("boom")

        with pytest.raises(VectorStoreError, match="Failed to count document chunks"):
            store.count


class TestCreateVectorStore:
    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError):
            create_vector_store("chroma", dimension=3)

    def test_supabase_with_client(self, mock_client: MagicMock) -> None:
        store = create_vector_store("supabase", dimension=3, client=mock_client)
        assert isinstance(store, SupabaseVectorStore)
