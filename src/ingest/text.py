from __future__ import annotations

"""Text normalization and word/paragraph splitting helpers."""

import re

_LINE_ENDING_RE = re.compile(r"\r\n?")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")
_PARAGRAPH_BREAK_RE = re.compile(r"\n{1,2}")


def clean_text(text: str) -> str:
    """Normalize line endings and whitespace while keeping paragraph breaks."""
    if not text:
        return ""
    cleaned = _LINE_ENDING_RE.sub("\n", text)
    cleaned = _EXCESS_NEWLINES_RE.sub("\n\n", cleaned)
    cleaned = _HORIZONTAL_SPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def split_paragraphs(text: str) -> list[str]:
    """Split cleaned text into trimmed, non-empty paragraphs."""
    paragraphs: list[str] = []
    for part in _PARAGRAPH_BREAK_RE.split(text):
        part = part.strip()
        if part:
            paragraphs.append(part)
    return paragraphs


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def split_by_words(paragraph: str, size: int) -> list[str]:
    """Regroup a paragraph into groups of at most ``size`` words."""
    if size <= 0:
        raise ValueError("size must be a positive word count")
    words = paragraph.split()
    return [" ".join(words[start : start + size]) for start in range(0, len(words), size)]


def tail_words(text: str, count: int) -> str:
    """Return the last ``count`` words of text (all of them if fewer)."""
    if count <= 0:
        return ""
    return " ".join(text.split()[-count:])
