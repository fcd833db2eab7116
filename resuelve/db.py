"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client for Postgres tables and RPC calls
- Upstash Redis client for carts, exchange rate cache and realtime streams
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis.asyncio import Redis as AsyncRedis


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_async_supabase_client: Optional[AsyncClient] = None
_redis_client: Optional[AsyncRedis] = None


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client (singleton).
    Uses the service role key; row-level security is enforced by the
    stored procedures themselves.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _async_supabase_client


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Used for:
    - Cart persistence
    - Exchange rate cache
    - Realtime order streams
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    # Cart storage, namespace shared with the web client's local storage entry
    CART_NAMESPACE = "resuelve-cart"

    # Exchange rate cache
    CURRENCY_RATE = "currency:rate:"  # currency:rate:{currency}

    # Realtime streams
    ORDERS_STREAM = "stream:realtime:orders:"  # stream:realtime:orders:{store_id}
    NOTIFICATIONS_STREAM = "stream:realtime:notifications:"  # ...:{user_id}

    @staticmethod
    def cart_key(owner_id: str) -> str:
        return f"{RedisKeys.CART_NAMESPACE}:{owner_id}"

    @staticmethod
    def currency_key(currency: str) -> str:
        return f"{RedisKeys.CURRENCY_RATE}{currency}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CURRENCY_CACHE = 3600  # 1 hour
