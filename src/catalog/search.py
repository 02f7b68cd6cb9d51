"""
In-memory product index answering top-N relevance queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from .index import CatalogEntry, load_catalog
from .scorer import normalize_query, score_entry, split_words

MAX_RESULTS = 2


@dataclass
class ScoredEntry:
    """An entry paired with its score for one search call."""

    entry: CatalogEntry
    score: int


class ProductIndex:
    """Read-only catalog loaded once; safe for concurrent searches."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: Tuple[CatalogEntry, ...] = tuple(entries)

    @classmethod
    def from_csv(cls, path: Path) -> "ProductIndex":
        return cls(load_catalog(path))

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def score_all(self, query: str) -> List[ScoredEntry]:
        """Score every entry, keep positives, order by score (ties keep catalog order)."""
        normalized = normalize_query(query or "")
        if not normalized or not self._entries:
            return []
        words = split_words(normalized)
        scored = [ScoredEntry(entry=e, score=score_entry(e, normalized, words)) for e in self._entries]
        matches = [s for s in scored if s.score > 0]
        # sorted() is stable, so equal scores stay in load order.
        matches.sort(key=lambda s: -s.score)
        return matches

    def search(self, query: str) -> List[CatalogEntry]:
        """Return the top MAX_RESULTS entries; empty query or catalog yields []."""
        return [s.entry for s in self.score_all(query)[:MAX_RESULTS]]
