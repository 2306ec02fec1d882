"""Session state for the chat pane and the uploader.

Plain Python objects so they can live in ``st.session_state`` and be tested
without a running Streamlit server.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Literal, MutableMapping, Optional

from models import ChatMessage, DocumentChunk
from stores import VectorStoreError

if TYPE_CHECKING:
    from pipelines import RetrievalPipeline

logger = logging.getLogger(__name__)

GREETING_MESSAGE = (
    "Hello! I'm your RAG Assistant. Upload some documents using the sidebar and "
    "then ask me questions about their content. I can also listen to your voice input!"
)
ERROR_REPLY = (
    "I apologize, but I encountered an error while processing your request. "
    "Please try again."
)

UploadState = Literal["processing", "success", "error"]


class ChatHistory:
    """Ordered chat messages, seeded with the assistant greeting."""

    def __init__(self, greeting: str = GREETING_MESSAGE):
        self.messages: list[ChatMessage] = [ChatMessage(content=greeting, is_user=False)]

    def __len__(self) -> int:
        return len(self.messages)

    def add_user_message(self, content: str) -> ChatMessage:
        message = ChatMessage(content=content.strip(), is_user=True)
        self.messages.append(message)
        return message

    def add_assistant_message(
        self, content: str, sources: Optional[list[DocumentChunk]] = None
    ) -> ChatMessage:
        message = ChatMessage(content=content, is_user=False, sources=sources or None)
        self.messages.append(message)
        return message

    def add_error_message(self) -> ChatMessage:
        return self.add_assistant_message(ERROR_REPLY)


@dataclass
class UploadStatus:
    file_id: str
    filename: str
    size: int
    status: UploadState = "processing"
    error: Optional[str] = None
    document_id: Optional[str] = None


@dataclass
class UploadTracker:
    """Per-file upload progress shown under the drop zone."""

    uploads: dict[str, UploadStatus] = field(default_factory=dict)
    dismissed: set[str] = field(default_factory=set)

    def __contains__(self, file_id: str) -> bool:
        """Whether the file was already handled, including dismissed ones."""
        return file_id in self.uploads or file_id in self.dismissed

    def start(self, file_id: str, filename: str, size: int) -> UploadStatus:
        status = UploadStatus(file_id=file_id, filename=filename, size=size)
        self.uploads[file_id] = status
        return status

    def succeed(self, file_id: str, document_id: str) -> None:
        upload = self.uploads[file_id]
        upload.status = "success"
        upload.document_id = document_id
        upload.error = None

    def fail(self, file_id: str, error: str) -> None:
        upload = self.uploads[file_id]
        upload.status = "error"
        upload.error = error

    def remove(self, file_id: str) -> None:
        self.uploads.pop(file_id, None)
        self.dismissed.add(file_id)

    @property
    def items(self) -> list[UploadStatus]:
        return list(self.uploads.values())


def get_or_create(session: MutableMapping[str, Any], key: str, factory: Callable[[], Any]) -> Any:
    """Fetch ``key`` from session state, creating it on first use."""
    if key not in session:
        session[key] = factory()
    return session[key]


def answer_question(
    question: str, retrieval: "RetrievalPipeline", history: ChatHistory
) -> tuple[ChatMessage, Optional[str]]:
    """Run one chat turn and record both sides in ``history``.

    Returns:
        The assistant message and, when retrieval failed, the error text to
        surface to the user.
    """
    history.add_user_message(question)
    try:
        result = retrieval.query(question.strip())
    except VectorStoreError as e:
        logger.error(f"Chat request failed: {e}")
        return history.add_error_message(), str(e)

    sources = [search_result.chunk for search_result in result["sources"]]
    return history.add_assistant_message(result["response"], sources), None


def run_upload(
    tracker: UploadTracker,
    file_id: str,
    filename: str,
    size: int,
    ingest: Callable[[], str],
) -> Optional[str]:
    """Ingest one upload and record the outcome in ``tracker``.

    The upload always leaves the "processing" state, whatever ``ingest``
    raises.

    Returns:
        None on success, otherwise the error text to surface to the user.
    """
    tracker.start(file_id, filename, size)
    try:
        document_id = ingest()
    except (ValueError, VectorStoreError) as e:
        error = str(e)
    except Exception as e:
        logger.exception(f"Unexpected error processing {filename}")
        error = f"Failed to process {filename}: {e}"
    else:
        tracker.succeed(file_id, document_id)
        return None

    tracker.fail(file_id, error)
    return error
