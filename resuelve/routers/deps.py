"""
Shared Dependencies for Routers

Lazy-loaded singletons; tests swap them through app.dependency_overrides.
"""

from typing import TYPE_CHECKING, Optional

from fastapi import Depends, Header, HTTPException

from resuelve.auth import AuthUser, get_optional_user
from resuelve.logging import get_logger

if TYPE_CHECKING:
    from resuelve.cart import CartManager
    from resuelve.checkout import CheckoutService
    from resuelve.services.currency import CurrencyService
    from resuelve.services.database import Database
    from resuelve.services.favorites import FavoriteService
    from resuelve.services.notifications import NotificationService
    from resuelve.services.orders import OrderHistoryService
    from resuelve.services.reviews import ReviewService

logger = get_logger(__name__)


# ==================== LAZY SINGLETONS ====================

_currency_service: Optional["CurrencyService"] = None


async def get_db() -> "Database":
    from resuelve.services.database import get_database_async
    return await get_database_async()


def get_cart_manager_dep() -> "CartManager":
    from resuelve.cart import get_cart_manager
    return get_cart_manager()


def get_currency_service_dep() -> "CurrencyService":
    """CurrencyService with Redis cache when Redis is configured."""
    global _currency_service
    if _currency_service is None:
        from resuelve.db import get_redis
        from resuelve.services.currency import CurrencyService

        try:
            redis = get_redis()
        except ValueError as e:
            logger.warning(f"Exchange rate cache disabled: {e}")
            redis = None
        _currency_service = CurrencyService(redis)
    return _currency_service


def get_checkout_service(
    db: "Database" = Depends(get_db),
    cart_manager: "CartManager" = Depends(get_cart_manager_dep),
    currency: "CurrencyService" = Depends(get_currency_service_dep),
) -> "CheckoutService":
    from resuelve.checkout import CheckoutService
    return CheckoutService(db, cart_manager, currency)


def get_notification_service(db: "Database" = Depends(get_db)) -> "NotificationService":
    from resuelve.services.notifications import NotificationService
    return NotificationService(db)


def get_review_service(db: "Database" = Depends(get_db)) -> "ReviewService":
    from resuelve.services.reviews import ReviewService
    return ReviewService(db)


def get_order_history_service(db: "Database" = Depends(get_db)) -> "OrderHistoryService":
    from resuelve.services.orders import OrderHistoryService
    return OrderHistoryService(db)


def get_favorite_service(db: "Database" = Depends(get_db)) -> "FavoriteService":
    from resuelve.services.favorites import FavoriteService
    return FavoriteService(db)


# ==================== CART OWNER ====================

USER_OWNER_PREFIX = "user:"
GUEST_OWNER_PREFIX = "guest:"


async def get_cart_owner(
    x_cart_id: str = Header(None, alias="X-Cart-Id"),
    user: Optional[AuthUser] = Depends(get_optional_user),
) -> str:
    """
    Signed-in buyers own their cart by user id, guests by device id.
    The two live under separate prefixes so a guest header never names
    a user's cart.
    """
    if user is not None:
        return f"{USER_OWNER_PREFIX}{user.id}"
    if x_cart_id and x_cart_id.strip():
        return f"{GUEST_OWNER_PREFIX}{x_cart_id.strip()}"
    raise HTTPException(status_code=400, detail="X-Cart-Id header required")
