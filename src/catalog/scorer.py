"""
Substring-based relevance scoring for catalog entries.
"""

from __future__ import annotations

from typing import List

from .index import CatalogEntry

TITLE_PHRASE_WEIGHT = 10
TITLE_WORD_WEIGHT = 5
TEXT_PHRASE_WEIGHT = 3
TEXT_WORD_WEIGHT = 1
CATEGORY_PHRASE_WEIGHT = 2


def normalize_query(query: str) -> str:
    return query.strip().lower()


def split_words(normalized_query: str) -> List[str]:
    """Split on whitespace runs. Repeated words are kept and each one scores."""
    return normalized_query.split()


def score_entry(entry: CatalogEntry, normalized_query: str, query_words: List[str]) -> int:
    """
    Score an entry against a lowercased query.

    Full-phrase hits weigh more than single-word hits; title beats description,
    description beats category. Matching is plain substring containment.
    """
    if not normalized_query:
        return 0
    title = entry.title.lower()
    text = entry.search_text.lower()
    category = entry.category.lower()

    score = 0
    if normalized_query in title:
        score += TITLE_PHRASE_WEIGHT
    for word in query_words:
        if word in title:
            score += TITLE_WORD_WEIGHT
    if normalized_query in text:
        score += TEXT_PHRASE_WEIGHT
    for word in query_words:
        if word in text:
            score += TEXT_WORD_WEIGHT
    if normalized_query in category:
        score += CATEGORY_PHRASE_WEIGHT
    return score
