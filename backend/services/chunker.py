"""Sentence-aware text chunking for extracted documents.

Splits text at sentence terminators (. ! ?) and packs sentences into chunks
no longer than the configured size. A sentence that is too long on its own is
packed word by word instead. The only chunks allowed to exceed the size are
single sentences or single words that are longer than the limit by themselves.
"""

import logging
import re

from config import get_settings

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = re.compile(r"[.!?]+")
SENTENCE_SEPARATOR = ". "
WORD_SEPARATOR = " "


def split_sentences(text: str) -> list[str]:
    """Split text on runs of sentence terminators, dropping empty pieces."""
    return [s.strip() for s in SENTENCE_TERMINATORS.split(text) if s.strip()]


class Chunker:
    """Packs sentences into bounded chunks.

    Pure and deterministic: the same text and size always give the same chunks.
    """

    def __init__(self, chunk_size: int | None = None) -> None:
        """Initialize chunker with the given size or the configured one.

        Raises:
            ValueError: If chunk_size is less than 1.
        """
        if chunk_size is None:
            chunk_size = get_settings().chunk_size
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.chunk_size = chunk_size

    def chunk_text(self, text: str) -> list[str]:
        """Split text into ordered chunks of at most `chunk_size` characters.

        Args:
            text: Extracted document text.

        Returns:
            Chunk strings in document order.
        """
        if not text or not text.strip():
            return []

        chunks: list[str] = []
        current = ""

        for sentence in split_sentences(text):
            if self._fits(current, sentence, SENTENCE_SEPARATOR):
                current = self._join(current, sentence, SENTENCE_SEPARATOR)
                continue

            if current:
                chunks.append(current)
                current = ""

            if len(sentence) > self.chunk_size:
                # Oversized sentence: full word-chunks are emitted, the tail
                # stays open so following sentences can join it.
                word_chunks = self._pack_words(sentence)
                chunks.extend(word_chunks[:-1])
                current = word_chunks[-1]
            else:
                current = sentence

        if current:
            chunks.append(current)

        logger.debug(
            "Chunking complete: %d chars -> %d chunks (max size: %d)",
            len(text),
            len(chunks),
            self.chunk_size,
        )
        return chunks

    def _pack_words(self, sentence: str) -> list[str]:
        """Pack a sentence's words into chunks; never returns an empty list."""
        word_chunks: list[str] = []
        current = ""

        for word in sentence.split():
            if current and not self._fits(current, word, WORD_SEPARATOR):
                word_chunks.append(current)
                current = ""
            current = self._join(current, word, WORD_SEPARATOR)

        word_chunks.append(current)
        return word_chunks

    def _fits(self, current: str, piece: str, separator: str) -> bool:
        return len(self._join(current, piece, separator)) <= self.chunk_size

    @staticmethod
    def _join(current: str, piece: str, separator: str) -> str:
        return f"{current}{separator}{piece}" if current else piece


def chunk_text(text: str, max_size: int) -> list[str]:
    """Chunk text with an explicit size limit."""
    return Chunker(max_size).chunk_text(text)
