"""
Service configuration loaded from environment variables (and .env when present).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CSV_PATH = ROOT / "data" / "products_list.csv"


def load_env_file() -> None:
    """Load the project .env file if it exists; real env vars win."""
    env_file = ROOT / ".env"
    if env_file.exists():
        load_dotenv(env_file)


def _get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class AppConfig:
    """Settings for the oracle, rate provider, catalog and request handling."""

    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    exchange_rates_api_key: str = ""
    exchange_rates_url: str = "https://openexchangerates.org/api"
    rate_cache_ttl_s: float = 3600.0
    csv_file_path: Path = DEFAULT_CSV_PATH
    request_timeout_s: float = 30.0
    http_timeout_s: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_env_file()
        csv_path = os.getenv("CSV_FILE_PATH")
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_temperature=_get_env_float("OPENAI_TEMPERATURE", 0.7),
            exchange_rates_api_key=os.getenv("OPEN_EXCHANGE_RATES_API_KEY", ""),
            exchange_rates_url=os.getenv(
                "OPEN_EXCHANGE_RATES_URL", "https://openexchangerates.org/api"
            ),
            rate_cache_ttl_s=_get_env_float("RATE_CACHE_TTL_SECONDS", 3600.0),
            csv_file_path=Path(csv_path) if csv_path else DEFAULT_CSV_PATH,
            request_timeout_s=_get_env_float("REQUEST_TIMEOUT_SECONDS", 30.0),
            http_timeout_s=_get_env_float("HTTP_TIMEOUT_SECONDS", 10.0),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
