from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ChunkRecord(BaseModel):
    content: str = Field(min_length=1)
    chunk_index: int = Field(ge=0)
    page_number: int = 1
    highlights: list[str] | None = None


class ChunkRequest(BaseModel):
    text: str | None = None
    pages: list[str] | None = None
    chunk_size: int | None = Field(default=None, ge=1)
    overlap: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_exactly_one_source(self) -> "ChunkRequest":
        if (self.text is None) == (self.pages is None):
            raise ValueError("provide exactly one of text or pages")
        return self


class ChunkResponse(BaseModel):
    chunks: list[ChunkRecord]
    chunk_count: int
    request_id: str


class RetrieveRequest(BaseModel):
    query: str
    chunks: list[ChunkRecord]
    limit: int | None = Field(default=None, ge=1)
    include_highlights: bool = False


class RetrieveResponse(BaseModel):
    chunks: list[ChunkRecord]
    query_terms: list[str]
    request_id: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    stack: str | None = None
