import tempfile
from pathlib import Path

from llama_index.core import SimpleDirectoryReader

from .base import BaseDocumentLoader


class RichDocumentLoader(BaseDocumentLoader):
    """PDF and DOCX text extraction using llama-index file readers.

    Each page (or document section) becomes one llama-index Document; their
    texts are joined with blank lines.
    """

    extensions = (".pdf", ".docx")

    def load_file(self, file_path: Path | str) -> str:
        reader = SimpleDirectoryReader(input_files=[str(file_path)])
        documents = reader.load_data()
        return "\n\n".join(doc.text for doc in documents if doc.text.strip())

    def load_bytes(self, filename: str, data: bytes) -> str:
        suffix = Path(filename).suffix.lower()
        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir) / f"upload{suffix}"
            tmp_path.write_bytes(data)
            return self.load_file(tmp_path)
