"""
Orchestrator: tool declarations, dispatch, and the two-call answer flow.
"""

from .agent import ShoppingAgent
from .results import (
    CurrencyConversionResult,
    ProductSearchResult,
    ProductSummary,
    ToolResult,
)
from .tools import CONVERT_CURRENCIES, SEARCH_PRODUCTS, ToolRegistry

__all__ = [
    "CONVERT_CURRENCIES",
    "CurrencyConversionResult",
    "ProductSearchResult",
    "ProductSummary",
    "SEARCH_PRODUCTS",
    "ShoppingAgent",
    "ToolRegistry",
    "ToolResult",
]
