"""Cart manager: every mutation is written through to storage."""
import json
from datetime import datetime, timezone
from typing import Optional

from resuelve.errors import ERROR_CART_UNAVAILABLE, CartStorageError
from resuelve.logging import get_logger, sanitize_id_for_logging
from resuelve.services.money import multiply, to_float

from .models import Cart, CartItem
from .storage import CartPayloadError, CartStorage, create_cart_storage, decode_payload

logger = get_logger(__name__)


class CartManager:
    """
    Loads, mutates and persists carts.

    Store conflicts (CartStoreConflictError) propagate untouched so the
    caller can offer "clear and add"; storage failures become
    CartStorageError.
    """

    def __init__(self, storage: Optional[CartStorage] = None):
        self._storage = storage

    @property
    def storage(self) -> CartStorage:
        """Storage backend (lazy initialization)."""
        if self._storage is None:
            self._storage = create_cart_storage()
        return self._storage

    async def get_cart(self, owner_id: str) -> Cart:
        """Get owner's cart; an empty cart when nothing is stored."""
        try:
            data = await self.storage.load(owner_id)
        except Exception as e:
            logger.error(f"Failed to load cart: {e}")
            raise CartStorageError(f"{ERROR_CART_UNAVAILABLE}: {e}") from e

        if not data:
            return Cart(owner_id=owner_id)

        try:
            return Cart.from_dict(decode_payload(data, owner_id))
        except (CartPayloadError, KeyError, TypeError, ValueError) as e:
            # Corrupted data - drop it and start over
            logger.warning(f"Corrupted cart data for {sanitize_id_for_logging(owner_id)}: {e}")
            await self._delete(owner_id)
            return Cart(owner_id=owner_id)

    async def save_cart(self, cart: Cart) -> Cart:
        cart.updated_at = datetime.now(timezone.utc).isoformat()
        try:
            await self.storage.save(cart.owner_id, json.dumps(cart.to_dict()))
        except Exception as e:
            logger.error(f"Failed to save cart: {e}")
            raise CartStorageError(f"{ERROR_CART_UNAVAILABLE}: {e}") from e
        return cart

    async def add_item(self, owner_id: str, item: CartItem) -> Cart:
        cart = await self.get_cart(owner_id)
        cart.add_item(item)
        return await self.save_cart(cart)

    async def replace_with(self, owner_id: str, item: CartItem) -> Cart:
        cart = await self.get_cart(owner_id)
        cart.replace_with(item)
        return await self.save_cart(cart)

    async def remove_item(self, owner_id: str, item_id: str) -> Cart:
        cart = await self.get_cart(owner_id)
        cart.remove_item(item_id)
        return await self.save_cart(cart)

    async def update_quantity(self, owner_id: str, item_id: str, quantity: int) -> Cart:
        cart = await self.get_cart(owner_id)
        cart.update_quantity(item_id, quantity)
        return await self.save_cart(cart)

    async def clear_cart(self, owner_id: str) -> Cart:
        await self._delete(owner_id)
        return Cart(owner_id=owner_id)

    async def _delete(self, owner_id: str) -> None:
        try:
            await self.storage.delete(owner_id)
        except Exception as e:
            logger.error(f"Failed to clear cart: {e}")
            raise CartStorageError(f"{ERROR_CART_UNAVAILABLE}: {e}") from e


def cart_to_response(cart: Cart, exchange_rate: Optional[float] = None) -> dict:
    """Serialize a cart for API responses (floats at the boundary)."""
    total_usd = cart.total_usd()
    response = {
        "owner_id": cart.owner_id,
        "store_id": cart.store_id,
        "store_name": cart.store_name,
        "is_empty": cart.is_empty,
        "total_items": cart.total_items,
        "items": [
            {
                "id": item.id,
                "title": item.title,
                "price_usd": to_float(item.price_usd),
                "quantity": item.quantity,
                "store_id": item.store_id,
                "store_name": item.store_name,
                "image_url": item.image_url,
                "line_total_usd": to_float(item.line_total_usd),
            }
            for item in cart.items
        ],
        "total_usd": to_float(total_usd),
        "updated_at": cart.updated_at,
    }
    if exchange_rate is not None:
        response["exchange_rate"] = exchange_rate
        response["total_bs"] = to_float(multiply(total_usd, exchange_rate))
    return response


_cart_manager: Optional[CartManager] = None


def get_cart_manager() -> CartManager:
    """Get CartManager singleton."""
    global _cart_manager
    if _cart_manager is None:
        _cart_manager = CartManager()
    return _cart_manager
