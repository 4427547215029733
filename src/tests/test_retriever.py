from __future__ import annotations

"""Lexical scoring and ranking tests."""

import math

import pytest

from src.ingest.chunking import chunk_text
from src.rag.retriever import (
    RetrievalError,
    find_relevant_chunks,
    positional_prior,
    rank_chunks,
    score_chunk,
)
from src.rag.types import Chunk, ChunkValidationError


def test_only_matching_chunk_is_returned(fruit_chunks) -> None:
    results = find_relevant_chunks(fruit_chunks, "apples", 5)

    assert results == [Chunk(content="apples and oranges", chunk_index=0, page_number=1)]


def test_results_carry_no_score(fruit_chunks) -> None:
    result = find_relevant_chunks(fruit_chunks, "apples")[0]

    assert not hasattr(result, "score")
    assert result.to_dict() == {
        "content": "apples and oranges",
        "chunk_index": 0,
        "page_number": 1,
    }


def test_empty_inputs_return_empty_results(fruit_chunks) -> None:
    assert find_relevant_chunks(fruit_chunks, "") == []
    assert find_relevant_chunks(fruit_chunks, "the and of") == []
    assert find_relevant_chunks([], "apples") == []


def test_score_combines_exact_partial_and_multi_term_bonus() -> None:
    chunk = Chunk(content="apples and oranges", chunk_index=0)

    scored = score_chunk(chunk, ["apples"])

    # exact 3 + partial 1 + bonus 2 * 2 matching terms, over sqrt(3) words, plus prior 1.
    assert scored.score == pytest.approx(8 / math.sqrt(3) + 1.0)


def test_partial_only_match_gets_no_multi_term_bonus() -> None:
    chunk = Chunk(content="micromachine learning is useful", chunk_index=0)

    scored = score_chunk(chunk, ["machine"])

    assert scored.score == pytest.approx(1 / 2 + 1.0)


def test_exact_match_beats_substring_match() -> None:
    exact = Chunk(content="machine learning is powerful", chunk_index=3)
    partial = Chunk(content="micromachine learning is useful", chunk_index=3)

    assert score_chunk(exact, ["machine"]).score > score_chunk(partial, ["machine"]).score
    assert find_relevant_chunks([partial, exact], "machine") == [exact, partial]


def test_chunks_without_overlap_are_never_returned() -> None:
    chunks = [
        Chunk(content="solar panels convert sunlight", chunk_index=0),
        Chunk(content="wind turbines spin", chunk_index=1),
        Chunk(content="hydro dams store water", chunk_index=2),
    ]

    results = find_relevant_chunks(chunks, "turbines", limit=50)

    assert [chunk.chunk_index for chunk in results] == [1]
    assert score_chunk(chunks[0], ["turbines"]).score == 0.0


def test_earlier_chunk_scores_at_least_as_high() -> None:
    early = Chunk(content="retrieval of relevant passages", chunk_index=0)
    later = Chunk(content="retrieval of relevant passages", chunk_index=10)

    assert score_chunk(early, ["retrieval"]).score >= score_chunk(later, ["retrieval"]).score
    assert find_relevant_chunks([later, early], "retrieval") == [early, later]


def test_positional_prior_decays_to_zero() -> None:
    assert positional_prior(0) == 1.0
    assert positional_prior(10) == pytest.approx(0.5)
    assert positional_prior(20) == 0.0
    assert positional_prior(35) == 0.0


def test_length_normalization_favours_focused_chunks() -> None:
    focused = Chunk(content="budget report", chunk_index=25)
    padded = Chunk(content="budget " + " ".join(["filler"] * 50), chunk_index=25)

    results = find_relevant_chunks([padded, focused], "budget")

    assert results == [focused, padded]


def test_multiple_query_terms_reward_chunks_matching_more_terms() -> None:
    both = Chunk(content="quarterly sales grew in europe", chunk_index=30)
    one = Chunk(content="quarterly results were flat overall", chunk_index=30)

    results = find_relevant_chunks([one, both], "Which quarterly sales in Europe?")

    assert results[0] == both


def test_limit_truncates_results() -> None:
    chunks = [Chunk(content=f"topic number {idx}", chunk_index=idx) for idx in range(10)]

    results = find_relevant_chunks(chunks, "topic", limit=3)

    assert [chunk.chunk_index for chunk in results] == [0, 1, 2]


def test_ties_are_broken_by_chunk_index() -> None:
    chunks = [
        Chunk(content="same words here", chunk_index=idx) for idx in (27, 21, 40, 23)
    ]

    results = find_relevant_chunks(chunks, "words", limit=10)

    assert [chunk.chunk_index for chunk in results] == [21, 23, 27, 40]


def test_rank_chunks_exposes_scores_in_descending_order() -> None:
    chunks = chunk_text(
        "Solar energy basics.\n\nWind energy and solar energy together.\n\nUnrelated text.",
        chunk_size=6,
        overlap=0,
    )

    ranked = rank_chunks(chunks, "solar energy")

    assert [item.score for item in ranked] == sorted((item.score for item in ranked), reverse=True)
    assert all(item.score > 0 for item in ranked)
    assert "Unrelated text." not in [item.chunk.content for item in ranked]


def test_accepts_stored_mapping_records() -> None:
    records = [
        {"content": "apples and oranges", "chunkIndex": 0, "pageNumber": 2},
        {"content": "bananas and grapes", "chunk_index": 1},
    ]

    results = find_relevant_chunks(records, "bananas")

    assert results == [Chunk(content="bananas and grapes", chunk_index=1, page_number=1)]


@pytest.mark.parametrize(
    "record",
    [
        {"chunk_index": 0},
        {"content": "text"},
        {"content": None, "chunk_index": 0},
        {"content": "   ", "chunk_index": 0},
        {"content": "text", "chunk_index": "0"},
        {"content": "text", "chunk_index": -1},
        {"content": "text", "chunk_index": 0, "page_number": "one"},
        "not a record",
    ],
)
def test_malformed_chunk_records_are_rejected(record) -> None:
    with pytest.raises(ChunkValidationError):
        find_relevant_chunks([record], "text")


@pytest.mark.parametrize("limit", [0, -1, 2.5, True])
def test_invalid_limit_is_rejected(fruit_chunks, limit) -> None:
    with pytest.raises(RetrievalError):
        find_relevant_chunks(fruit_chunks, "apples", limit=limit)


def test_non_string_query_is_rejected(fruit_chunks) -> None:
    with pytest.raises(RetrievalError):
        find_relevant_chunks(fruit_chunks, None)
