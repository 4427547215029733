from __future__ import annotations

"""Core data types for chunks and lexical retrieval."""

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_PAGE_NUMBER = 1


class ChunkValidationError(ValueError):
    """Raised when a chunk record is missing fields or carries bad values."""
    pass


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChunkValidationError(f"{field_name} must be an integer, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Chunk:
    """Indexed span of a document's cleaned text."""
    content: str
    chunk_index: int
    page_number: int = DEFAULT_PAGE_NUMBER

    def __post_init__(self) -> None:
        if not isinstance(self.content, str):
            raise ChunkValidationError(
                f"content must be a string, got {type(self.content).__name__}"
            )
        if not self.content.strip():
            raise ChunkValidationError("content must not be blank")
        if _require_int(self.chunk_index, "chunk_index") < 0:
            raise ChunkValidationError("chunk_index must not be negative")
        _require_int(self.page_number, "page_number")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Chunk:
        """Build a chunk from a stored record, accepting camelCase keys."""
        if "content" not in data:
            raise ChunkValidationError("chunk record is missing content")
        if "chunk_index" in data:
            chunk_index = data["chunk_index"]
        elif "chunkIndex" in data:
            chunk_index = data["chunkIndex"]
        else:
            raise ChunkValidationError("chunk record is missing chunk_index")
        page_number = data.get("page_number", data.get("pageNumber", DEFAULT_PAGE_NUMBER))
        if page_number is None:
            page_number = DEFAULT_PAGE_NUMBER
        return cls(content=data["content"], chunk_index=chunk_index, page_number=page_number)

    def to_dict(self) -> dict[str, Any]:
        """Public projection: content, chunk_index and page_number only."""
        return {
            "content": self.content,
            "chunk_index": self.chunk_index,
            "page_number": self.page_number,
        }


@dataclass(frozen=True)
class ScoredChunk:
    """Chunk with its lexical relevance score, used only for ranking."""
    chunk: Chunk
    score: float

    def to_chunk(self) -> Chunk:
        """Drop the score and return the public chunk record."""
        return self.chunk


def coerce_chunk(value: Chunk | Mapping[str, Any]) -> Chunk:
    """Accept either a Chunk or a stored mapping record."""
    if isinstance(value, Chunk):
        return value
    if isinstance(value, Mapping):
        return Chunk.from_mapping(value)
    raise ChunkValidationError(f"unsupported chunk record type: {type(value).__name__}")
