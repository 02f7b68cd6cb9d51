"""
Exchange rate snapshot, upstream provider, and a time-bounded cache with
stale-on-error fallback.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol

import httpx

from src.errors import ConfigurationError, RateFetchError

logger = logging.getLogger(__name__)

BASE_CURRENCY = "USD"
DEFAULT_TTL_SECONDS = 3600.0


@dataclass(frozen=True)
class ExchangeRateSnapshot:
    """Rates relative to `base`, keyed by uppercase currency code."""

    rates: Dict[str, float]
    base: str = BASE_CURRENCY
    timestamp: float = field(default_factory=time.time)

    def rate_for(self, code: str) -> Optional[float]:
        """Return the rate for `code`, or None when absent or non-positive."""
        if code == self.base:
            return 1.0
        rate = self.rates.get(code)
        if rate is None or rate <= 0:
            return None
        return rate


class RateProvider(Protocol):
    """Source of fresh exchange rate snapshots."""

    def fetch(self) -> ExchangeRateSnapshot:
        ...


class OpenExchangeRatesProvider:
    """Fetch latest rates from the Open Exchange Rates API (USD base)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openexchangerates.org/api",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key:
            raise ConfigurationError("Open Exchange Rates API key is not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def fetch(self) -> ExchangeRateSnapshot:
        try:
            response = self.client.get(
                f"{self.base_url}/latest.json",
                params={"app_id": self.api_key},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise RateFetchError(f"Failed to fetch exchange rates: {e}") from e
        except ValueError as e:
            raise RateFetchError(f"Failed to fetch exchange rates: invalid JSON ({e})") from e

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RateFetchError("Failed to fetch exchange rates: response has no 'rates' mapping")
        normalized: Dict[str, float] = {}
        for code, value in rates.items():
            try:
                normalized[str(code).upper()] = float(value)
            except (TypeError, ValueError):
                continue
        return ExchangeRateSnapshot(
            rates=normalized,
            base=str(data.get("base") or BASE_CURRENCY).upper(),
            timestamp=float(data.get("timestamp") or time.time()),
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class RateCache:
    """
    Holds one snapshot and the monotonic time it was fetched.

    Fresh snapshots are served without a network call. When the snapshot is
    missing or older than `ttl_seconds`, one caller refreshes while concurrent
    callers wait on the lock and then reuse its result. A failed refresh falls
    back to the previous snapshot however old; only an empty cache raises.
    """

    def __init__(
        self,
        provider: RateProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: Optional[ExchangeRateSnapshot] = None
        self._fetched_at: float = 0.0
        self._refresh_lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[ExchangeRateSnapshot]:
        return self._snapshot

    def _is_fresh(self) -> bool:
        return self._snapshot is not None and self._clock() - self._fetched_at < self.ttl_seconds

    def get_rates(self) -> ExchangeRateSnapshot:
        snapshot = self._snapshot
        if snapshot is not None and self._is_fresh():
            return snapshot

        with self._refresh_lock:
            # Another caller may have refreshed while we waited.
            if self._is_fresh():
                return self._snapshot
            try:
                fresh = self.provider.fetch()
            except RateFetchError as e:
                if self._snapshot is not None:
                    logger.warning("Failed to refresh exchange rates, using cached data: %s", e)
                    return self._snapshot
                raise
            except Exception as e:
                if self._snapshot is not None:
                    logger.warning("Failed to refresh exchange rates, using cached data: %s", e)
                    return self._snapshot
                raise RateFetchError(f"Failed to fetch exchange rates: {e}") from e
            self._snapshot = fresh
            self._fetched_at = self._clock()
            logger.debug("Exchange rates refreshed (%s currencies)", len(fresh.rates))
            return fresh
