from pathlib import Path

from .base import BaseDocumentLoader
from .pdf import RichDocumentLoader
from .text import TextLoader
from .validation import get_extension, validate_file

_LOADERS: list[type[BaseDocumentLoader]] = [TextLoader, RichDocumentLoader]


def get_loader_for_file(file_path: Path | str) -> BaseDocumentLoader:
    """Get the appropriate loader for a file based on extension.

    Raises:
        ValueError: If no loader handles the extension.
    """
    suffix = get_extension(str(file_path))
    for loader_cls in _LOADERS:
        if suffix in loader_cls.extensions:
            return loader_cls()

    raise ValueError(f"No loader available for file type: {suffix}")


__all__ = [
    "BaseDocumentLoader",
    "RichDocumentLoader",
    "TextLoader",
    "get_extension",
    "get_loader_for_file",
    "validate_file",
]
