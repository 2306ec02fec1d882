from .base import BaseDocumentLoader


class TextLoader(BaseDocumentLoader):
    """Plain text and Markdown files, decoded as UTF-8."""

    extensions = (".txt", ".md")

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load_bytes(self, filename: str, data: bytes) -> str:
        return data.decode(self.encoding, errors="replace")
