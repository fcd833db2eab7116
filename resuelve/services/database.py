"""
Supabase Database Service

Provides a Database facade over the repositories.

Usage:
    from resuelve.services.database import get_database_async

    db = await get_database_async()
    store = await db.get_store("store-1")
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from supabase._async.client import AsyncClient

from resuelve.db import get_supabase
from resuelve.logging import get_logger
from resuelve.services.models import (
    Address,
    Notification,
    Order,
    OrderItem,
    PaymentMethod,
    PushSubscription,
    Review,
    Store,
)
from resuelve.services.repositories import (
    FavoriteRepository,
    NotificationRepository,
    OrderRepository,
    ReviewRepository,
    StoreRepository,
)

logger = get_logger(__name__)


class Database:
    """
    Supabase database client with all operations.

    Must be initialized via `create()` or `init_database()`.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

        self._stores_repo = StoreRepository(self.client)
        self._orders_repo = OrderRepository(self.client)
        self._reviews_repo = ReviewRepository(self.client)
        self._notifications_repo = NotificationRepository(self.client)
        self._favorites_repo = FavoriteRepository(self.client)

    @classmethod
    async def create(cls) -> "Database":
        client = await get_supabase()
        return cls(client)

    # ==================== STORES ====================

    async def get_store(self, store_id: str) -> Optional[Store]:
        return await self._stores_repo.get_by_id(store_id)

    async def get_payment_methods(self, store_id: str) -> List[PaymentMethod]:
        return await self._stores_repo.get_payment_methods(store_id)

    async def get_addresses(self, user_id: str) -> List[Address]:
        return await self._stores_repo.get_addresses(user_id)

    # ==================== ORDERS ====================

    async def create_order(self, **order: Any) -> Any:
        return await self._orders_repo.create(**order)

    async def get_buyer_orders(self, buyer_id: str) -> List[Order]:
        return await self._orders_repo.get_by_buyer(buyer_id)

    async def get_buyer_order(self, order_id: str, buyer_id: str) -> Optional[Tuple[Order, List[OrderItem]]]:
        return await self._orders_repo.get_with_items(order_id, buyer_id)

    # ==================== FAVORITES ====================

    async def get_favorite_products(self, user_id: str) -> List[Dict[str, Any]]:
        return await self._favorites_repo.get_products(user_id)

    async def is_favorite(self, user_id: str, product_id: str) -> bool:
        return await self._favorites_repo.exists(user_id, product_id)

    async def add_favorite(self, user_id: str, product_id: str) -> None:
        await self._favorites_repo.add(user_id, product_id)

    async def remove_favorite(self, user_id: str, product_id: str) -> None:
        await self._favorites_repo.remove(user_id, product_id)

    # ==================== REVIEWS ====================

    async def create_review(
        self,
        user_id: str,
        product_id: str,
        store_id: Optional[str],
        rating: int,
        comment: str = "",
    ) -> Review:
        return await self._reviews_repo.create(user_id, product_id, store_id, rating, comment)

    async def get_product_reviews(self, product_id: str) -> List[Review]:
        return await self._reviews_repo.get_by_product(product_id)

    async def get_product_rating(self, product_id: str) -> Dict[str, float]:
        """Average rating (1 decimal) and review count."""
        ratings = await self._reviews_repo.get_ratings(product_id)
        if not ratings:
            return {"average": 0, "count": 0}
        return {"average": round(sum(ratings) / len(ratings), 1), "count": len(ratings)}

    # ==================== NOTIFICATIONS ====================

    async def get_notifications(self, user_id: str) -> List[Notification]:
        return await self._notifications_repo.get_latest(user_id)

    async def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "info",
        link: Optional[str] = None,
    ) -> Notification:
        return await self._notifications_repo.create(user_id, title, message, type, link)

    async def mark_notification_read(self, user_id: str, notification_id: str) -> None:
        await self._notifications_repo.mark_read(user_id, notification_id)

    async def mark_all_notifications_read(self, user_id: str) -> None:
        await self._notifications_repo.mark_all_read(user_id)

    async def get_push_subscriptions(self, user_id: str) -> List[PushSubscription]:
        return await self._notifications_repo.get_subscriptions(user_id)

    async def save_push_subscription(self, user_id: str, endpoint: str, p256dh: str, auth: str) -> None:
        await self._notifications_repo.save_subscription(user_id, endpoint, p256dh, auth)

    async def delete_push_subscription(self, subscription_id: str) -> None:
        await self._notifications_repo.delete_subscription(subscription_id)

    async def delete_push_subscription_by_endpoint(self, user_id: str, endpoint: str) -> None:
        await self._notifications_repo.delete_subscription_by_endpoint(user_id, endpoint)

    async def find_user_id_by_email(self, email: str) -> Optional[str]:
        return await self._notifications_repo.find_user_id_by_email(email)


_db: Database | None = None
_db_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    global _db_lock
    if _db_lock is None:
        _db_lock = asyncio.Lock()
    return _db_lock


async def init_database() -> Database:
    """Initialize async database singleton.

    Called at FastAPI startup (lifespan) or lazily on first use.
    """
    global _db
    if _db is not None:
        return _db

    async with _get_lock():
        if _db is None:
            logger.info("Initializing async Supabase client...")
            _db = await Database.create()
            logger.info("Async Supabase client initialized successfully")
    return _db


async def get_database_async() -> Database:
    """Get database instance with lazy async initialization."""
    if _db is None:
        return await init_database()
    return _db
