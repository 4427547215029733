from __future__ import annotations

"""FastAPI application exposing chunking and lexical retrieval over HTTP."""

import logging
import traceback
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.metrics import (
    metrics_middleware,
    metrics_response,
    record_chunks_created,
    record_retrieval_results,
)
from src.app.schemas import (
    ChunkRecord,
    ChunkRequest,
    ChunkResponse,
    ErrorResponse,
    RetrieveRequest,
    RetrieveResponse,
)
from src.app.settings import settings
from src.ingest.chunking import ChunkingError, chunk_pages, chunk_text
from src.rag.highlights import build_highlights
from src.rag.query import extract_query_words
from src.rag.retriever import RetrievalError, find_relevant_chunks
from src.rag.types import Chunk, ChunkValidationError

logger = logging.getLogger(__name__)

app = FastAPI(title="Lexical Chunk Retrieval", version="0.1.0")


def _configure_logging() -> None:
    """Configure root logging using environment settings."""
    level_name = settings.log_level.strip().upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


_configure_logging()


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or str(uuid.uuid4())


def _error_response(status_code: int, message: str, exc: BaseException) -> JSONResponse:
    """Render the shared error envelope; stack traces stay out of production."""
    stack = None
    if settings.show_error_stack:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    payload = ErrorResponse(message=message, stack=stack)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(ChunkingError)
@app.exception_handler(ChunkValidationError)
@app.exception_handler(RetrievalError)
async def precondition_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning(
        "precondition_failed",
        extra={"request_id": _request_id(request), "error": type(exc).__name__},
    )
    return _error_response(400, str(exc), exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = errors[0].get("msg", "")
        message = f"Invalid {location}: {detail}" if location else f"Invalid request: {detail}"
    return _error_response(422, message, exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), exc)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Attach or create a request ID for traceability."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception("unhandled_error", extra={"request_id": request_id})
        response = _error_response(500, "Internal Server Error", exc)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    """Capture request metrics before returning the response."""
    return await metrics_middleware(request, call_next)


@app.get("/metrics")
async def metrics():
    """Expose Prometheus-style metrics."""
    return metrics_response()


@app.get("/health")
async def health() -> dict[str, str]:
    """Simple health probe for uptime checks."""
    return {"status": "ok"}


def _to_record(chunk: Chunk, highlights: list[str] | None = None) -> ChunkRecord:
    return ChunkRecord(
        content=chunk.content,
        chunk_index=chunk.chunk_index,
        page_number=chunk.page_number,
        highlights=highlights,
    )


@app.post("/chunk", response_model=ChunkResponse, response_model_exclude_none=True)
async def chunk(request: ChunkRequest, http_request: Request) -> ChunkResponse:
    """Split document text (or page texts) into indexed, overlapping chunks."""
    request_id = _request_id(http_request)
    chunk_size = request.chunk_size or settings.chunk_size
    overlap = settings.chunk_overlap if request.overlap is None else request.overlap

    total_chars = len(request.text or "") + sum(len(page) for page in request.pages or [])
    if total_chars > settings.max_text_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text exceeds maximum size of {settings.max_text_chars} characters",
        )

    if request.pages is not None:
        chunks = chunk_pages(request.pages, chunk_size=chunk_size, overlap=overlap)
    else:
        chunks = chunk_text(request.text or "", chunk_size=chunk_size, overlap=overlap)

    record_chunks_created(len(chunks))
    logger.info(
        "chunk_completed",
        extra={
            "request_id": request_id,
            "text_length": total_chars,
            "page_count": len(request.pages) if request.pages is not None else None,
            "chunk_size": chunk_size,
            "overlap": overlap,
            "chunk_count": len(chunks),
        },
    )
    return ChunkResponse(
        chunks=[_to_record(item) for item in chunks],
        chunk_count=len(chunks),
        request_id=request_id,
    )


@app.post("/retrieve", response_model=RetrieveResponse, response_model_exclude_none=True)
async def retrieve(request: RetrieveRequest, http_request: Request) -> RetrieveResponse:
    """Return the chunks most relevant to a query, best first."""
    request_id = _request_id(http_request)
    limit = request.limit or settings.retrieval_limit
    if limit > settings.max_retrieval_limit:
        raise HTTPException(
            status_code=400,
            detail=f"limit must not exceed {settings.max_retrieval_limit}",
        )

    candidates = [
        Chunk(
            content=record.content,
            chunk_index=record.chunk_index,
            page_number=record.page_number,
        )
        for record in request.chunks
    ]
    results = find_relevant_chunks(candidates, request.query, limit=limit)
    query_terms = extract_query_words(request.query)

    records: list[ChunkRecord] = []
    for item in results:
        highlights = None
        if request.include_highlights:
            highlights = build_highlights(
                item.content,
                request.query,
                window=settings.highlight_window,
            )
        records.append(_to_record(item, highlights))

    record_retrieval_results(len(records))
    logger.info(
        "retrieve_completed",
        extra={
            "request_id": request_id,
            "query_length": len(request.query),
            "query_term_count": len(query_terms),
            "candidate_count": len(candidates),
            "result_count": len(records),
            "limit": limit,
        },
    )
    return RetrieveResponse(chunks=records, query_terms=query_terms, request_id=request_id)
