"""
Currency Conversion Service

Fetches the USD -> VES exchange rate used to show Bolívar prices next to
USD prices and to compute the local-currency total of an order.
"""
import os
from decimal import Decimal
from typing import Dict, Optional, Union

import httpx

from resuelve.db import RedisKeys, TTL
from resuelve.logging import get_logger
from resuelve.services.money import format_money, multiply, to_decimal

logger = get_logger(__name__)

LOCAL_CURRENCY = "VES"

# Used when the rate source and the cache are both unavailable
FALLBACK_EXCHANGE_RATE = 38.5

EXCHANGE_RATE_API_URL = os.environ.get(
    "EXCHANGE_RATE_API_URL", "https://ve.dolarapi.com/v1/dolares/oficial"
)

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "VES": "Bs",
}


class CurrencyService:
    """Exchange rate lookup with Redis cache and fixed fallback."""

    def __init__(self, redis_client=None, api_url: Optional[str] = None):
        """
        Args:
            redis_client: Optional Upstash Redis client for caching the rate
            api_url: Rate source returning JSON with a "promedio" field
        """
        self.redis = redis_client
        self.api_url = api_url or EXCHANGE_RATE_API_URL

    async def get_exchange_rate(self, target_currency: str = LOCAL_CURRENCY) -> float:
        """
        Get exchange rate for target currency (1 USD = X target_currency).

        Never raises: cache and fetch failures fall through to
        FALLBACK_EXCHANGE_RATE.
        """
        if target_currency == "USD":
            return 1.0

        cached_rate = await self._get_cached_rate(target_currency)
        if cached_rate:
            return cached_rate

        rate = await self._fetch_exchange_rate()
        if rate:
            await self._cache_rate(target_currency, rate)
            return rate

        logger.warning(
            f"Could not get exchange rate for {target_currency}, "
            f"using fallback {FALLBACK_EXCHANGE_RATE}"
        )
        return FALLBACK_EXCHANGE_RATE

    async def _get_cached_rate(self, currency: str) -> Optional[float]:
        """Get cached exchange rate from Redis."""
        if not self.redis:
            return None

        try:
            result = await self.redis.get(RedisKeys.currency_key(currency))
            return float(result) if result else None
        except Exception as e:
            logger.warning(f"Failed to get cached rate: {e}")
            return None

    async def _cache_rate(self, currency: str, rate: float) -> None:
        """Cache exchange rate in Redis with 1 hour TTL."""
        if not self.redis:
            return

        try:
            await self.redis.setex(RedisKeys.currency_key(currency), TTL.CURRENCY_CACHE, str(rate))
        except Exception as e:
            logger.warning(f"Failed to cache rate: {e}")

    async def _fetch_exchange_rate(self) -> Optional[float]:
        """Fetch the official USD rate from the external source."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(self.api_url)
                response.raise_for_status()
                data = response.json()
                rate = data.get("promedio")
                if rate is None:
                    logger.warning(f"Exchange rate response has no 'promedio' field: {data}")
                    return None
                rate = float(rate)
                return rate if rate > 0 else None
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Error fetching exchange rate: {e}")
            return None

    @staticmethod
    def convert(price_usd: Union[float, Decimal, str, int], rate: Union[float, Decimal]) -> Decimal:
        """Convert a USD amount to local currency at full precision."""
        return multiply(to_decimal(price_usd), rate)

    def format_price(self, price: Union[float, Decimal, str, int], currency: str) -> str:
        """Format price with currency symbol: "$1,234.50", "Bs 1,234.50"."""
        return format_money(price, currency)


_currency_service: Optional[CurrencyService] = None


def get_currency_service(redis_client=None) -> CurrencyService:
    """Get or create global currency service instance."""
    global _currency_service
    if _currency_service is None:
        _currency_service = CurrencyService(redis_client)
    return _currency_service
