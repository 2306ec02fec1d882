import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .document import DocumentChunk


class ChatMessage(BaseModel):
    """A single message in the chat pane."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    is_user: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    sources: Optional[list[DocumentChunk]] = None
