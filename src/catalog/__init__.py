"""
Product catalog: CSV loading, relevance scoring and top-N search.
"""

from .index import CatalogEntry, load_catalog
from .scorer import normalize_query, score_entry, split_words
from .search import MAX_RESULTS, ProductIndex, ScoredEntry

__all__ = [
    "CatalogEntry",
    "load_catalog",
    "normalize_query",
    "score_entry",
    "split_words",
    "MAX_RESULTS",
    "ProductIndex",
    "ScoredEntry",
]
