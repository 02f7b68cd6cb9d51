"""
Build the product index, currency converter and agent for the API (used in lifespan).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.catalog import ProductIndex
from src.config import AppConfig
from src.currency import CurrencyConverter, OpenExchangeRatesProvider, RateCache
from src.errors import ConfigurationError
from src.llm import create_oracle
from src.orchestrator import ShoppingAgent

logger = logging.getLogger(__name__)


@dataclass
class ServiceState:
    """Objects shared by all requests for the lifetime of the process."""

    config: AppConfig
    product_index: ProductIndex
    converter: CurrencyConverter
    agent: Optional[ShoppingAgent] = None
    rate_provider: Optional[OpenExchangeRatesProvider] = None

    def close(self) -> None:
        if self.rate_provider is not None:
            self.rate_provider.close()


def build_rate_cache(config: AppConfig) -> tuple[Optional[RateCache], Optional[OpenExchangeRatesProvider]]:
    """Return (cache, provider); both None when the rate API key is missing."""
    if not config.exchange_rates_api_key:
        return None, None
    provider = OpenExchangeRatesProvider(
        api_key=config.exchange_rates_api_key,
        base_url=config.exchange_rates_url,
        timeout=config.http_timeout_s,
    )
    return RateCache(provider, ttl_seconds=config.rate_cache_ttl_s), provider


def build_service(config: Optional[AppConfig] = None) -> ServiceState:
    """
    Load the catalog, wire the converter, and build the agent.

    A missing oracle key leaves agent=None so /api/chat can answer 503.
    """
    config = config or AppConfig.from_env()
    product_index = ProductIndex.from_csv(config.csv_file_path)
    rate_cache, provider = build_rate_cache(config)
    converter = CurrencyConverter(rate_cache)
    agent: Optional[ShoppingAgent] = None
    try:
        oracle = create_oracle(config)
        agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    except ConfigurationError as e:
        logger.warning("Chat disabled: %s", e)
    return ServiceState(
        config=config,
        product_index=product_index,
        converter=converter,
        agent=agent,
        rate_provider=provider,
    )
