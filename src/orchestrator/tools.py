"""
Declarations of the tools the oracle may call.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

SEARCH_PRODUCTS = "searchProducts"
CONVERT_CURRENCIES = "convertCurrencies"

SEARCH_PRODUCTS_SCHEMA: Dict[str, Any] = {
    "name": SEARCH_PRODUCTS,
    "description": (
        "Search for products in the store catalog. "
        "Returns up to 2 most relevant products based on the search query."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": 'The search query to find relevant products (e.g., "phone", "watch", "present for dad")',
            },
        },
        "required": ["query"],
    },
}

CONVERT_CURRENCIES_SCHEMA: Dict[str, Any] = {
    "name": CONVERT_CURRENCIES,
    "description": "Convert an amount from one currency to another using current exchange rates.",
    "parameters": {
        "type": "object",
        "properties": {
            "amount": {
                "type": "number",
                "description": "The amount to convert (must be a positive number)",
            },
            "fromCurrency": {
                "type": "string",
                "description": 'The source currency code (e.g., "USD", "EUR", "CAD")',
            },
            "toCurrency": {
                "type": "string",
                "description": 'The target currency code (e.g., "USD", "EUR", "CAD")',
            },
        },
        "required": ["amount", "fromCurrency", "toCurrency"],
    },
}


class ToolRegistry:
    """Static set of function declarations exposed to the oracle."""

    def __init__(self) -> None:
        self._schemas: Dict[str, Dict[str, Any]] = {
            SEARCH_PRODUCTS: SEARCH_PRODUCTS_SCHEMA,
            CONVERT_CURRENCIES: CONVERT_CURRENCIES_SCHEMA,
        }

    @property
    def names(self) -> List[str]:
        return list(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def declarations(self) -> List[Dict[str, Any]]:
        """Chat-completions `tools` payload; a fresh copy on each call."""
        return [
            {"type": "function", "function": copy.deepcopy(schema)}
            for schema in self._schemas.values()
        ]
