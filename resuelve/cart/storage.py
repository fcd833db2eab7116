"""
Cart persistence.

One JSON blob per cart owner under the "resuelve-cart" namespace. Blobs
carry a schema version; older shapes are upgraded on read.
"""
import json
import os
from typing import Dict, Optional, Protocol

from resuelve.db import RedisKeys, get_redis
from resuelve.logging import get_logger

from .models import CART_SCHEMA_VERSION

logger = get_logger(__name__)


class CartPayloadError(ValueError):
    """Stored blob cannot be interpreted as a cart."""


def upgrade_payload(raw, owner_id: str) -> dict:
    """
    Bring a stored cart blob up to CART_SCHEMA_VERSION.

    Version 1 is what the web client kept in local storage: either a bare
    list of items or the persist wrapper {"state": {"items": [...]}}, with
    camelCase item keys and no version tag.
    """
    if isinstance(raw, list):
        raw = {"items": raw}
    if not isinstance(raw, dict):
        raise CartPayloadError(f"unexpected cart payload type: {type(raw).__name__}")

    version = raw.get("version", 1)
    if not isinstance(version, int) or version > CART_SCHEMA_VERSION:
        raise CartPayloadError(f"unsupported cart version: {version!r}")

    if version == 1:
        items = raw.get("items")
        if items is None:
            items = (raw.get("state") or {}).get("items", [])
        if not isinstance(items, list):
            raise CartPayloadError("cart items must be a list")
        raw = {
            "version": 2,
            "owner_id": owner_id,
            "items": items,
            "created_at": raw.get("created_at", ""),
            "updated_at": raw.get("updated_at", ""),
        }

    raw.setdefault("owner_id", owner_id)
    return raw


class CartStorage(Protocol):
    async def load(self, owner_id: str) -> Optional[str]: ...

    async def save(self, owner_id: str, payload: str) -> None: ...

    async def delete(self, owner_id: str) -> None: ...


class RedisCartStorage:
    """Carts in Upstash Redis, no expiry: a cart lives until cleared."""

    def __init__(self, redis_client=None):
        self._redis = redis_client

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, owner_id: str) -> Optional[str]:
        return await self.redis.get(RedisKeys.cart_key(owner_id))

    async def save(self, owner_id: str, payload: str) -> None:
        await self.redis.set(RedisKeys.cart_key(owner_id), payload)

    async def delete(self, owner_id: str) -> None:
        await self.redis.delete(RedisKeys.cart_key(owner_id))


class MemoryCartStorage:
    """Process-local storage for development and tests."""

    def __init__(self):
        self.blobs: Dict[str, str] = {}

    async def load(self, owner_id: str) -> Optional[str]:
        return self.blobs.get(RedisKeys.cart_key(owner_id))

    async def save(self, owner_id: str, payload: str) -> None:
        self.blobs[RedisKeys.cart_key(owner_id)] = payload

    async def delete(self, owner_id: str) -> None:
        self.blobs.pop(RedisKeys.cart_key(owner_id), None)


def decode_payload(data, owner_id: str) -> dict:
    """Parse a stored blob (str or already-decoded JSON) into a current payload."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise CartPayloadError(f"invalid JSON: {e}") from e
    return upgrade_payload(data, owner_id)


def create_cart_storage() -> CartStorage:
    """Pick the backend from CART_STORAGE (redis | memory)."""
    backend = os.environ.get("CART_STORAGE", "redis").lower()
    if backend == "memory":
        logger.info("Using in-memory cart storage")
        return MemoryCartStorage()
    return RedisCartStorage()
