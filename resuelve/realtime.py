"""Realtime Module - order and notification events over Redis Streams.

Sellers watch their store's order stream; buyers watch their own
notification stream. Emitting is best effort: a failure is logged and
never propagates to the request that triggered it.
"""

import json
from typing import Any

from resuelve.db import RedisKeys, get_redis
from resuelve.logging import get_logger

logger = get_logger(__name__)


async def _emit(stream_key: str, payload: dict[str, Any]) -> None:
    redis = get_redis()
    await redis.xadd(stream_key, "*", {"data": json.dumps(payload, default=str)})


async def emit_order_created(
    store_id: str, order_id: str | None, total_usd: float, total_bs: float
) -> None:
    """Emit order.created to the seller's store stream.

    Args:
        store_id: Store UUID
        order_id: Order UUID (None when the procedure returned no id)
        total_usd: Order total in USD
        total_bs: Order total in Bolívares
    """
    try:
        payload = {
            "event": "order.created",
            "order_id": order_id,
            "store_id": store_id,
            "total_usd": total_usd,
            "total_bs": total_bs,
        }
        await _emit(f"{RedisKeys.ORDERS_STREAM}{store_id}", payload)
        logger.debug(f"Emitted order.created for store {store_id}")
    except Exception as e:
        logger.warning(f"Failed to emit order.created: {e}", exc_info=True)


async def emit_notification_created(user_id: str, notification: dict[str, Any]) -> None:
    """Emit notification.created to the user's stream."""
    try:
        payload = {
            "event": "notification.created",
            "user_id": user_id,
            "data": notification,
        }
        await _emit(f"{RedisKeys.NOTIFICATIONS_STREAM}{user_id}", payload)
        logger.debug(f"Emitted notification.created for user {user_id}")
    except Exception as e:
        logger.warning(f"Failed to emit notification.created: {e}", exc_info=True)
