"""Cart package: models, storage, and manager facade."""
from .models import Cart, CartItem
from .service import CartManager, cart_to_response, get_cart_manager
from .storage import MemoryCartStorage, RedisCartStorage

__all__ = [
    "CartItem",
    "Cart",
    "CartManager",
    "cart_to_response",
    "get_cart_manager",
    "MemoryCartStorage",
    "RedisCartStorage",
]
