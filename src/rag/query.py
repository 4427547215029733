from __future__ import annotations

"""Query normalization into lexical search terms."""

import re

STOP_WORDS = frozenset(
    {
        "the",
        "is",
        "in",
        "at",
        "which",
        "on",
        "and",
        "a",
        "an",
        "to",
        "of",
        "for",
        "with",
        "by",
        "as",
        "that",
        "this",
        "it",
        "from",
        "be",
        "or",
        "are",
        "was",
        "were",
        "has",
        "have",
        "had",
    }
)

_NON_WORD_RE = re.compile(r"[^\w\s]")


def extract_query_words(query: str) -> list[str]:
    """Return unique, lower-cased query terms with punctuation and stop-words removed."""
    if not query:
        return []
    seen: set[str] = set()
    terms: list[str] = []
    for token in _NON_WORD_RE.sub("", query.lower()).split():
        if token in STOP_WORDS or token in seen:
            continue
        seen.add(token)
        terms.append(token)
    return terms
