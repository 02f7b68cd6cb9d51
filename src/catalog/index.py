"""
Catalog data loading from the products CSV.
"""

from __future__ import annotations

import csv
import dataclasses
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Older exports use the storefront's column names.
_COLUMN_ALIASES = {
    "title": ("title", "displayTitle"),
    "search_text": ("searchText", "embeddingText"),
    "category": ("category", "productType"),
    "url": ("url",),
    "image_url": ("imageUrl",),
    "price": ("price",),
    "variants": ("variants",),
    "discount": ("discount",),
    "create_date": ("createDate",),
}


@dataclasses.dataclass(frozen=True)
class CatalogEntry:
    """A single product row. Price and variants are passed through verbatim."""

    title: str
    search_text: str
    url: str = ""
    image_url: str = ""
    category: str = ""
    price: str = ""
    variants: str = ""
    discount: int = 0
    create_date: str = ""


def _cell(row: Dict[str, Optional[str]], field: str) -> str:
    for column in _COLUMN_ALIASES[field]:
        value = row.get(column)
        if value:
            return value
    return ""


def _parse_discount(raw: str) -> int:
    try:
        value = int(raw.strip() or "0")
    except ValueError:
        return 0
    return max(value, 0)


def entry_from_row(row: Dict[str, Optional[str]]) -> CatalogEntry:
    """Build a CatalogEntry from one CSV row; missing cells become empty strings."""
    return CatalogEntry(
        title=_cell(row, "title"),
        search_text=_cell(row, "search_text"),
        url=_cell(row, "url"),
        image_url=_cell(row, "image_url"),
        category=_cell(row, "category"),
        price=_cell(row, "price"),
        variants=_cell(row, "variants"),
        discount=_parse_discount(_cell(row, "discount")),
        create_date=_cell(row, "create_date"),
    )


def load_catalog(path: Path) -> List[CatalogEntry]:
    """
    Load catalog entries from a CSV file with a header row.

    A missing file is not an error: a warning is logged and an empty list returned.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Catalog CSV not found at %s. Product search will be unavailable.", path)
        return []

    entries: List[CatalogEntry] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        for row in csv.DictReader(f):
            entries.append(entry_from_row(row))
    logger.info("Loaded %s products from %s", len(entries), path)
    return entries
