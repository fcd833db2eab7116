"""HTTP routers."""
from fastapi import APIRouter

from .cart import router as cart_router
from .checkout import router as checkout_router
from .favorites import router as favorites_router
from .geo import router as geo_router
from .notifications import router as notifications_router
from .orders import router as orders_router
from .reviews import router as reviews_router

router = APIRouter()
router.include_router(cart_router)
router.include_router(checkout_router)
router.include_router(orders_router)
router.include_router(favorites_router)
router.include_router(geo_router)
router.include_router(reviews_router)
router.include_router(notifications_router)

__all__ = ["router"]
