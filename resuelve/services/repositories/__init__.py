"""Repository classes over the async Supabase client."""
from .base import BaseRepository
from .favorite_repo import FavoriteRepository
from .notification_repo import NotificationRepository
from .order_repo import OrderRepository
from .review_repo import ReviewRepository
from .store_repo import StoreRepository

__all__ = [
    "BaseRepository",
    "FavoriteRepository",
    "NotificationRepository",
    "OrderRepository",
    "ReviewRepository",
    "StoreRepository",
]
