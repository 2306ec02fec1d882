import re

from config import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE

from .base import BaseTextSplitter

# A run of non-terminal characters plus the punctuation that ends it.
_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]*")

# Overlap is configured in characters; roughly ten characters per word.
CHARS_PER_WORD = 10


def split_sentences(text: str) -> list[str]:
    """Split text on sentence-terminal punctuation, dropping empty pieces."""
    sentences = (match.group().strip() for match in _SENTENCE_PATTERN.finditer(text))
    return [sentence for sentence in sentences if sentence]


class SentenceTextSplitter(BaseTextSplitter):
    """Greedy sentence packer with a word-based overlap between chunks.

    Sentences are appended to a running buffer until the next one would push
    it past ``chunk_size`` characters. The buffer is then emitted and the next
    buffer starts with the last ``chunk_overlap // 10`` words of the emitted
    chunk. A sentence longer than ``chunk_size`` is never split.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap must not be negative")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    @property
    def overlap_words(self) -> int:
        return self.chunk_overlap // CHARS_PER_WORD

    def _overlap_seed(self, chunk: str) -> str:
        if self.overlap_words == 0:
            return ""
        return " ".join(chunk.split()[-self.overlap_words :])

    def split_text(self, text: str) -> list[str]:
        chunks: list[str] = []
        current = ""

        for sentence in split_sentences(text):
            if current and len(current) + 1 + len(sentence) > self.chunk_size:
                chunks.append(current)
                seed = self._overlap_seed(current)
                current = f"{seed} {sentence}" if seed else sentence
            else:
                current = f"{current} {sentence}" if current else sentence

        if current:
            chunks.append(current)

        return chunks
