from __future__ import annotations

"""Snippets showing where query terms occur in a retrieved chunk."""

import re

from src.rag.query import extract_query_words


def _mark_terms(snippet: str, marker: re.Pattern[str]) -> str:
    return marker.sub(lambda match: f"[[{match.group(0)}]]", snippet)


def build_highlights(
    content: str,
    query: str,
    max_snippets: int = 3,
    window: int = 80,
) -> list[str]:
    """Return up to ``max_snippets`` windows around the first hit of each query term.

    Every term occurrence inside a snippet is wrapped as ``[[term]]``. Matching
    is case-insensitive and runs on the original text, so offsets stay valid
    for characters whose lower-case form has a different length.
    """
    text = content.strip()
    terms = extract_query_words(query)
    if not text or not terms or max_snippets <= 0:
        return []

    # Longest alternative first so "machine" is marked whole rather than "mac".
    marker = re.compile(
        "|".join(re.escape(term) for term in sorted(terms, key=len, reverse=True)),
        re.IGNORECASE,
    )
    snippets: list[str] = []
    for term in terms:
        hit = re.search(re.escape(term), text, re.IGNORECASE)
        if hit is None:
            continue
        start = max(0, hit.start() - window)
        end = min(len(text), hit.end() + window)
        snippet = _mark_terms(text[start:end].strip(), marker)
        if snippet in snippets:
            continue
        snippets.append(snippet)
        if len(snippets) == max_snippets:
            break
    return snippets
