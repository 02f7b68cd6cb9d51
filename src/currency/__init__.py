"""
Currency conversion over a cached exchange-rate snapshot.
"""

from .converter import CurrencyConverter, round_money
from .rates import (
    BASE_CURRENCY,
    ExchangeRateSnapshot,
    OpenExchangeRatesProvider,
    RateCache,
    RateProvider,
)

__all__ = [
    "BASE_CURRENCY",
    "CurrencyConverter",
    "ExchangeRateSnapshot",
    "OpenExchangeRatesProvider",
    "RateCache",
    "RateProvider",
    "round_money",
]
