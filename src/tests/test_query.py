from __future__ import annotations

from src.rag.query import STOP_WORDS, extract_query_words


def test_extract_query_words_drops_stop_words() -> None:
    assert extract_query_words("the cat and the hat") == ["cat", "hat"]


def test_extract_query_words_lowercases_and_strips_punctuation() -> None:
    assert extract_query_words("What's Machine-Learning, really?!") == [
        "whats",
        "machinelearning",
        "really",
    ]


def test_extract_query_words_keeps_first_occurrence_only() -> None:
    assert extract_query_words("Cat cat CAT dog cat") == ["cat", "dog"]


def test_extract_query_words_keeps_underscores_and_digits() -> None:
    assert extract_query_words("q4_sales in 2023") == ["q4_sales", "2023"]


def test_stop_word_only_query_has_no_terms() -> None:
    assert extract_query_words("Which of the, and?") == []
    assert extract_query_words("") == []
    assert extract_query_words("   ") == []


def test_stop_words_are_immutable() -> None:
    assert isinstance(STOP_WORDS, frozenset)
    assert {"the", "which", "had"} <= STOP_WORDS
    assert "cat" not in STOP_WORDS
