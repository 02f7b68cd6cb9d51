"""
Typed tool results serialized back to the oracle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from src.catalog import CatalogEntry


@dataclass(frozen=True)
class ProductSummary:
    title: str
    price: str
    url: str
    image_url: str
    category: str
    variants: str

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "ProductSummary":
        return cls(
            title=entry.title,
            price=entry.price,
            url=entry.url,
            image_url=entry.image_url,
            category=entry.category,
            variants=entry.variants,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "price": self.price,
            "url": self.url,
            "imageUrl": self.image_url,
            "category": self.category,
            "variants": self.variants,
        }


@dataclass(frozen=True)
class ProductSearchResult:
    products: List[ProductSummary] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.products)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "products": [p.to_payload() for p in self.products],
            "count": self.count,
        }


@dataclass(frozen=True)
class CurrencyConversionResult:
    original_amount: float
    from_currency: str
    to_currency: str
    converted_amount: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "originalAmount": self.original_amount,
            "fromCurrency": self.from_currency,
            "toCurrency": self.to_currency,
            "convertedAmount": self.converted_amount,
        }


ToolResult = Union[ProductSearchResult, CurrencyConversionResult]
