"""
Shopping agent: ask the oracle whether a tool is needed, run it, then have
the oracle write the final answer from the tool result.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from src.catalog import ProductIndex
from src.currency import CurrencyConverter
from src.errors import (
    EmptyOracleResponseError,
    QueryProcessingError,
    UnknownToolError,
    ValidationError,
)
from src.llm.oracle import Oracle, ToolInvocation

from .prompts import DECISION_PROMPT, FALLBACK_ANSWER, SYNTHESIS_PROMPT
from .results import (
    CurrencyConversionResult,
    ProductSearchResult,
    ProductSummary,
    ToolResult,
)
from .tools import CONVERT_CURRENCIES, SEARCH_PRODUCTS, ToolRegistry

logger = logging.getLogger(__name__)


def _require_currency(args: Dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing or invalid '{key}' argument")
    return value.strip().upper()


def _require_amount(args: Dict[str, Any]) -> float:
    value = args.get("amount")
    if isinstance(value, bool):
        raise ValidationError("Missing or invalid 'amount' argument")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass
    raise ValidationError("Missing or invalid 'amount' argument")


class ShoppingAgent:
    """Single-pass tool-calling loop; keeps no state between queries."""

    def __init__(
        self,
        oracle: Oracle,
        product_index: ProductIndex,
        converter: CurrencyConverter,
        registry: Optional[ToolRegistry] = None,
    ):
        self.oracle = oracle
        self.product_index = product_index
        self.converter = converter
        self.registry = registry or ToolRegistry()

    def answer(self, query: str) -> str:
        """
        Answer one user query.

        Raises ValidationError for an empty query. Every other failure is
        wrapped in QueryProcessingError carrying the cause's message.
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Query must be a non-empty string")
        try:
            return self._run(query)
        except QueryProcessingError:
            raise
        except Exception as e:
            message = str(e) or "Unknown error occurred"
            logger.error("Error processing query: %s", message)
            raise QueryProcessingError(message, cause=e) from e

    process_query = answer

    def _run(self, query: str) -> str:
        reply = self.oracle.decide(DECISION_PROMPT, query, self.registry.declarations())
        invocation = reply.first_invocation
        if invocation is None:
            return reply.content or FALLBACK_ANSWER
        if len(reply.invocations) > 1:
            # Only the first requested tool is executed.
            logger.info(
                "Oracle requested %s tools; ignoring all but '%s'",
                len(reply.invocations),
                invocation.name,
            )

        result = self.dispatch(invocation, query)
        final = self.oracle.synthesize(SYNTHESIS_PROMPT, query, invocation, result.to_payload())
        if not final:
            raise EmptyOracleResponseError("No final response from OpenAI")
        return final

    def dispatch(self, invocation: ToolInvocation, query: str) -> ToolResult:
        """Run the requested tool; `query` is the fallback search text."""
        logger.info("Executing tool %s (call_id=%s)", invocation.name, invocation.call_id)
        if invocation.name == SEARCH_PRODUCTS:
            return self._search(invocation.arguments, query)
        if invocation.name == CONVERT_CURRENCIES:
            return self._convert(invocation.arguments)
        raise UnknownToolError(invocation.name)

    def _search(self, args: Dict[str, Any], query: str) -> ProductSearchResult:
        search_query = args.get("query")
        if not isinstance(search_query, str) or not search_query.strip():
            search_query = query
        entries = self.product_index.search(search_query)
        return ProductSearchResult(products=[ProductSummary.from_entry(e) for e in entries])

    def _convert(self, args: Dict[str, Any]) -> CurrencyConversionResult:
        amount = _require_amount(args)
        from_currency = _require_currency(args, "fromCurrency")
        to_currency = _require_currency(args, "toCurrency")
        converted = self.converter.convert(amount, from_currency, to_currency)
        return CurrencyConversionResult(
            original_amount=amount,
            from_currency=from_currency,
            to_currency=to_currency,
            converted_amount=converted,
        )
