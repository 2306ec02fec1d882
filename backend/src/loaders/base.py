from abc import ABC, abstractmethod
from pathlib import Path


class BaseDocumentLoader(ABC):
    """Abstract base class for text extraction from uploaded files."""

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def load_bytes(self, filename: str, data: bytes) -> str:
        """Extract the text of an uploaded file held in memory."""
        pass

    def load_file(self, file_path: Path | str) -> str:
        """Extract the text of a file on disk."""
        file_path = Path(file_path)
        return self.load_bytes(file_path.name, file_path.read_bytes())
