from pathlib import Path
from typing import Iterable

from config import MAX_FILE_SIZE_MB, SUPPORTED_EXTENSIONS

MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024


def get_extension(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_file(
    filename: str,
    size: int,
    max_size: int = MAX_FILE_SIZE_BYTES,
    extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
) -> tuple[bool, str]:
    """Check an upload against the size limit and the allowed extensions.

    Returns:
        Tuple of (is_valid, error message). The message is empty when valid.
    """
    if size > max_size:
        limit_mb = max_size / (1024 * 1024)
        return False, f"File size exceeds {limit_mb:g}MB limit"

    if get_extension(filename) not in {ext.lower() for ext in extensions}:
        return False, "Unsupported file type"

    return True, ""
