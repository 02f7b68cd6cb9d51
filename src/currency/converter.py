"""
Currency conversion pivoting through the snapshot's base currency.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from src.errors import ConfigurationError, InvalidAmountError, UnknownCurrencyError

from .rates import RateCache

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


class CurrencyConverter:
    """Convert amounts between currency codes using a RateCache."""

    def __init__(self, rate_cache: Optional[RateCache]):
        self.rate_cache = rate_cache
        if rate_cache is None:
            logger.warning(
                "Open Exchange Rates API key not configured. Currency conversion will be unavailable."
            )

    @property
    def enabled(self) -> bool:
        return self.rate_cache is not None

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise InvalidAmountError("Invalid amount. Amount must be a number.")
        if not math.isfinite(amount) or amount < 0:
            raise InvalidAmountError("Invalid amount. Amount must be a positive number.")

        source = from_currency.strip().upper()
        target = to_currency.strip().upper()
        if source == target:
            return amount

        if self.rate_cache is None:
            raise ConfigurationError("Open Exchange Rates API key is not configured")
        snapshot = self.rate_cache.get_rates()

        src_rate = snapshot.rate_for(source)
        if src_rate is None:
            raise UnknownCurrencyError(source, role="Source")
        dst_rate = snapshot.rate_for(target)
        if dst_rate is None:
            raise UnknownCurrencyError(target, role="Target")

        amount_in_base = amount if source == snapshot.base else amount / src_rate
        converted = amount_in_base if target == snapshot.base else amount_in_base * dst_rate
        return round_money(converted)
