from datetime import datetime
from unittest.mock import MagicMock

from models import Document, DocumentChunk, SearchResult
from stores import VectorStoreError
from ui.formatting import format_date, format_file_size, format_time
from ui.landing import greeting_reply
from ui.state import (
    ERROR_REPLY,
    GREETING_MESSAGE,
    ChatHistory,
    UploadTracker,
    answer_question,
    get_or_create,
    run_upload,
)


class TestFormatting:
    def test_format_file_size(self) -> None:
        assert format_file_size(0) == "0 Bytes"
        assert format_file_size(500) == "500 Bytes"
        assert format_file_size(1024) == "1 KB"
        assert format_file_size(1536) == "1.5 KB"
        assert format_file_size(10 * 1024 * 1024) == "10 MB"
        assert format_file_size(1234567, decimals=2) == "1.18 MB"

    def test_format_time(self) -> None:
        assert format_time(datetime(2024, 3, 4, 9, 5)) == "09:05 AM"

    def test_format_date(self) -> None:
        assert format_date(datetime(2024, 3, 4, 15, 30)) == "Mar 4, 03:30 PM"


class TestChatHistory:
    def test_starts_with_greeting(self) -> None:
        history = ChatHistory()
        assert len(history) == 1
        assert history.messages[0].content == GREETING_MESSAGE
        assert history.messages[0].is_user is False

    def test_user_message_is_trimmed(self) -> None:
        history = ChatHistory()
        message = history.add_user_message("  hello  ")
        assert message.content == "hello"
        assert message.is_user is True

    def test_assistant_message_without_sources(self) -> None:
        message = ChatHistory().add_assistant_message("Reply", [])
        assert message.sources is None

    def test_message_ids_are_unique(self) -> None:
        history = ChatHistory()
        history.add_user_message("a")
        history.add_user_message("a")
        assert len({m.id for m in history.messages}) == 3


class TestUploadTracker:
    def test_lifecycle(self) -> None:
        tracker = UploadTracker()
        tracker.start("f1", "notes.txt", 120)
        assert "f1" in tracker
        assert tracker.items[0].status == "processing"

        tracker.succeed("f1", "doc-1")
        assert tracker.items[0].status == "success"
        assert tracker.items[0].document_id == "doc-1"

    def test_failure_records_error(self) -> None:
        tracker = UploadTracker()
        tracker.start("f1", "notes.txt", 120)
        tracker.fail("f1", "Failed to store document in vector database")

        upload = tracker.items[0]
        assert upload.status == "error"
        assert upload.error == "Failed to store document in vector database"

    def test_removed_upload_is_not_reprocessed(self) -> None:
        tracker = UploadTracker()
        tracker.start("f1", "notes.txt", 120)
        tracker.remove("f1")

        assert tracker.items == []
        assert "f1" in tracker

    def test_get_or_create(self) -> None:
        session: dict = {}
        tracker = get_or_create(session, "uploads", UploadTracker)
        assert get_or_create(session, "uploads", UploadTracker) is tracker


class TestRunUpload:
    def test_success_records_document(self) -> None:
        tracker = UploadTracker()

        error = run_upload(tracker, "f1", "notes.txt", 120, lambda: "doc-1")

        assert error is None
        assert tracker.items[0].status == "success"
        assert tracker.items[0].document_id == "doc-1"

    def test_rejected_file_reports_message(self) -> None:
        tracker = UploadTracker()
        ingest = MagicMock(side_effect=ValueError("File notes.txt has no extractable text"))

        error = run_upload(tracker, "f1", "notes.txt", 120, ingest)

        assert error == "File notes.txt has no extractable text"
        assert tracker.items[0].status == "error"

    def test_unexpected_error_does_not_leave_processing(self) -> None:
        tracker = UploadTracker()
        ingest = MagicMock(side_effect=RuntimeError("disk full"))

        error = run_upload(tracker, "f1", "notes.txt", 120, ingest)

        assert error == "Failed to process notes.txt: disk full"
        assert tracker.items[0].status == "error"
        assert tracker.items[0].error == error


class TestAnswerQuestion:
    def test_records_reply_with_sources(self) -> None:
        chunk = DocumentChunk(id="c1", document_id="d1", content="Budget is 5k.")
        retrieval = MagicMock()
        retrieval.query.return_value = {
            "response": "The budget is 5k.",
            "sources": [
                SearchResult(chunk=chunk, similarity=0.9, document=Document(id="d1", filename="a.txt"))
            ],
        }
        history = ChatHistory()

        reply, error = answer_question("  What is the budget?  ", retrieval, history)

        retrieval.query.assert_called_once_with("What is the budget?")
        assert error is None
        assert reply.content == "The budget is 5k."
        assert reply.sources == [chunk]
        assert [m.is_user for m in history.messages] == [False, True, False]

    def test_store_failure_adds_apology(self) -> None:
        retrieval = MagicMock()
        retrieval.query.side_effect = VectorStoreError("Failed to search vector database")
        history = ChatHistory()

        reply, error = answer_question("question", retrieval, history)

        assert reply.content == ERROR_REPLY
        assert error == "Failed to search vector database"
        assert history.messages[1].content == "question"


class TestGreetingReply:
    def test_echoes_input(self) -> None:
        assert greeting_reply("hi there") == (
            'Hello! You said: "hi there". How can I assist you further?'
        )

    def test_blank_input(self) -> None:
        assert greeting_reply("   ") is None
