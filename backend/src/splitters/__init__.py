from .base import BaseTextSplitter
from .sentence import SentenceTextSplitter, split_sentences

TextSplitter = SentenceTextSplitter

__all__ = ["BaseTextSplitter", "SentenceTextSplitter", "TextSplitter", "split_sentences"]
