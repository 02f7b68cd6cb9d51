"""
Exception types shared by the catalog, currency, oracle and orchestration layers.
"""

from __future__ import annotations

from typing import Optional


class ShopAssistantError(Exception):
    """Base class for all service errors."""


class ConfigurationError(ShopAssistantError):
    """A required credential or setting is missing."""


class ValidationError(ShopAssistantError):
    """Empty query or malformed tool arguments."""


class UnknownToolError(ShopAssistantError):
    """The oracle asked for a tool that is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown function: {name}")
        self.name = name


class UnknownCurrencyError(ShopAssistantError):
    """A currency code is not present in the rate snapshot."""

    def __init__(self, code: str, role: str = "Currency"):
        super().__init__(f"{role} currency '{code}' not found in exchange rates")
        self.code = code


class InvalidAmountError(ShopAssistantError):
    """Amount is negative, NaN or infinite."""


class RateFetchError(ShopAssistantError):
    """The upstream rate provider could not be reached or returned bad data."""


class OracleError(ShopAssistantError):
    """The reasoning oracle failed or returned a malformed reply."""


class EmptyOracleResponseError(OracleError):
    """The synthesis call returned no content."""


class QueryTimeoutError(ShopAssistantError):
    """The request took longer than the configured timeout."""


class QueryProcessingError(ShopAssistantError):
    """Outward-facing wrapper for any failure while answering a query."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to process query: {message}")
        self.cause = cause
