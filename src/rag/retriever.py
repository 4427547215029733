from __future__ import annotations

"""Lexical chunk scoring and top-k retrieval."""

import logging
import math
from typing import Any, Iterable, Mapping

from src.rag.query import extract_query_words
from src.rag.types import Chunk, ScoredChunk, coerce_chunk

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
EXACT_MATCH_WEIGHT = 3.0
PARTIAL_MATCH_WEIGHT = 1.0
MULTI_TERM_WEIGHT = 2.0
POSITION_DECAY = 0.05


class RetrievalError(ValueError):
    """Raised when retrieval arguments violate their preconditions."""
    pass


def positional_prior(chunk_index: int) -> float:
    """Bonus for early chunks, decaying linearly to zero at index 20."""
    return max(0.0, 1.0 - chunk_index * POSITION_DECAY)


def _lexical_score(words: list[str], terms: Iterable[str]) -> float:
    score = 0.0
    matching_terms = 0
    for term in terms:
        exact = sum(1 for word in words if word == term)
        if exact:
            score += EXACT_MATCH_WEIGHT * exact
            matching_terms += 1
        # Exact hits are substrings too, so strong matches count twice.
        partial = sum(1 for word in words if term in word)
        if partial:
            score += PARTIAL_MATCH_WEIGHT * partial
            matching_terms += 1
    if matching_terms > 1:
        score += MULTI_TERM_WEIGHT * matching_terms
    return score


def score_chunk(chunk: Chunk, terms: list[str]) -> ScoredChunk:
    """Score a chunk against query terms; chunks matching no term score zero."""
    words = chunk.content.lower().split()
    lexical = _lexical_score(words, terms)
    if lexical <= 0 or not words:
        return ScoredChunk(chunk=chunk, score=0.0)
    score = lexical / math.sqrt(len(words)) + positional_prior(chunk.chunk_index)
    return ScoredChunk(chunk=chunk, score=score)


def _validate(query: Any, limit: Any) -> None:
    if not isinstance(query, str):
        raise RetrievalError(f"query must be a string, got {type(query).__name__}")
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise RetrievalError(f"limit must be an integer, got {type(limit).__name__}")
    if limit < 1:
        raise RetrievalError(f"limit must be at least 1, got {limit}")


def rank_chunks(
    chunks: Iterable[Chunk | Mapping[str, Any]],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[ScoredChunk]:
    """Score chunks for a query and return the top results with their scores."""
    _validate(query, limit)
    terms = extract_query_words(query)
    if not terms:
        logger.debug("query_without_terms")
        return []
    records = [coerce_chunk(chunk) for chunk in chunks]
    if not records:
        return []
    scored = [score_chunk(chunk, terms) for chunk in records]
    scored = [result for result in scored if result.score > 0]
    scored.sort(key=lambda item: (-item.score, item.chunk.chunk_index))
    top = scored[:limit]
    logger.debug(
        "chunks_ranked",
        extra={
            "term_count": len(terms),
            "candidate_count": len(records),
            "matched_count": len(scored),
            "returned_count": len(top),
        },
    )
    return top


def find_relevant_chunks(
    chunks: Iterable[Chunk | Mapping[str, Any]],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[Chunk]:
    """Return the chunks most relevant to a query, best first, without scores."""
    return [result.to_chunk() for result in rank_chunks(chunks, query, limit)]
