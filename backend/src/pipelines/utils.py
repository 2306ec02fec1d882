import mimetypes
from pathlib import Path

mimetypes.add_type("text/markdown", ".md")
mimetypes.add_type(
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document", ".docx"
)


def guess_file_type(filename: str, content_type: str | None = None) -> str:
    """MIME type reported by the uploader, else guessed from the extension."""
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(Path(filename).name)
    return guessed or "application/octet-stream"
