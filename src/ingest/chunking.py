from __future__ import annotations

"""Paragraph-aware, word-count based text chunking with overlap."""

import logging
from typing import Iterable

from src.ingest.text import (
    clean_text,
    count_words,
    split_by_words,
    split_paragraphs,
    tail_words,
)
from src.rag.types import DEFAULT_PAGE_NUMBER, Chunk

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500
DEFAULT_OVERLAP = 50


class ChunkingError(ValueError):
    """Raised when chunking parameters violate their preconditions."""
    pass


def validate_chunk_params(chunk_size: int, overlap: int) -> None:
    """Reject sizes that would loop or corrupt chunk indexing."""
    for name, value in (("chunk_size", chunk_size), ("overlap", overlap)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ChunkingError(f"{name} must be an integer, got {type(value).__name__}")
    if chunk_size < 1:
        raise ChunkingError(f"chunk_size must be at least 1, got {chunk_size}")
    if overlap < 0:
        raise ChunkingError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        logger.warning(
            "chunk_overlap_not_smaller_than_size",
            extra={"chunk_size": chunk_size, "overlap": overlap},
        )


class _ChunkAccumulator:
    """Collects paragraph fragments and flushes them into indexed chunks."""

    def __init__(self, overlap: int, page_number: int, start_index: int = 0) -> None:
        self.overlap = overlap
        self.page_number = page_number
        self.next_index = start_index
        self.chunks: list[Chunk] = []
        self.fragments: list[str] = []
        self.word_count = 0

    def seed(self, fragment: str) -> None:
        """Replace the current chunk with a single fragment."""
        self.fragments = [fragment]
        self.word_count = count_words(fragment)

    def append(self, paragraph: str, words: int) -> None:
        self.fragments.append(paragraph)
        self.word_count += words

    def flush(self) -> None:
        if not self.fragments:
            return
        content = "\n\n".join(self.fragments).strip()
        self.fragments = []
        self.word_count = 0
        if not content:
            return
        self.chunks.append(
            Chunk(content=content, chunk_index=self.next_index, page_number=self.page_number)
        )
        self.next_index += 1
        if self.overlap > 0:
            carried = tail_words(content, self.overlap)
            if carried:
                self.seed(carried)


def _chunk_cleaned(
    cleaned: str,
    chunk_size: int,
    overlap: int,
    page_number: int,
    start_index: int,
) -> list[Chunk]:
    accumulator = _ChunkAccumulator(overlap, page_number, start_index)
    for paragraph in split_paragraphs(cleaned):
        words = count_words(paragraph)
        if words > chunk_size:
            accumulator.flush()
            parts = split_by_words(paragraph, chunk_size)
            for part in parts[:-1]:
                accumulator.seed(part)
                accumulator.flush()
            accumulator.seed(parts[-1])
            continue
        if accumulator.word_count + words > chunk_size:
            accumulator.flush()
        accumulator.append(paragraph, words)
    accumulator.flush()

    if accumulator.chunks:
        return accumulator.chunks
    return [
        Chunk(content=content, chunk_index=start_index + offset, page_number=page_number)
        for offset, content in enumerate(split_by_words(cleaned, chunk_size))
    ]


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[Chunk]:
    """Split text into overlapping, paragraph-aware chunks indexed from zero."""
    validate_chunk_params(chunk_size, overlap)
    if not text or not text.strip():
        return []
    chunks = _chunk_cleaned(
        clean_text(text),
        chunk_size=chunk_size,
        overlap=overlap,
        page_number=DEFAULT_PAGE_NUMBER,
        start_index=0,
    )
    logger.debug(
        "text_chunked",
        extra={"chunk_count": len(chunks), "chunk_size": chunk_size, "overlap": overlap},
    )
    return chunks


def chunk_pages(
    pages: Iterable[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[Chunk]:
    """Chunk page texts in order, numbering pages from 1 and chunks across pages.

    Overlap is carried between chunks of the same page only.
    """
    validate_chunk_params(chunk_size, overlap)
    chunks: list[Chunk] = []
    page_count = 0
    for page_number, page_text in enumerate(pages, start=1):
        page_count = page_number
        if not page_text or not page_text.strip():
            continue
        chunks.extend(
            _chunk_cleaned(
                clean_text(page_text),
                chunk_size=chunk_size,
                overlap=overlap,
                page_number=page_number,
                start_index=len(chunks),
            )
        )
    logger.debug(
        "pages_chunked",
        extra={"page_count": page_count, "chunk_count": len(chunks)},
    )
    return chunks
