"""
Cart Router

Shopping cart endpoints. Every response carries USD totals plus the
Bolívar total at the current exchange rate.
"""
from fastapi import APIRouter, Depends, HTTPException

from resuelve.cart import CartItem, CartManager, cart_to_response
from resuelve.errors import CartStorageError, CartStoreConflictError
from resuelve.logging import get_logger
from resuelve.services.currency import CurrencyService

from .deps import get_cart_manager_dep, get_cart_owner, get_currency_service_dep
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


async def _respond(cart, currency: CurrencyService) -> dict:
    rate = await currency.get_exchange_rate()
    return cart_to_response(cart, exchange_rate=rate)


def _conflict(e: CartStoreConflictError) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={
            "message": str(e),
            "current_store_name": e.current_store_name,
            "new_store_name": e.new_store_name,
        },
    )


def _unavailable(e: CartStorageError) -> HTTPException:
    logger.error(f"Cart storage failure: {e}", exc_info=True)
    return HTTPException(status_code=503, detail=str(e))


def _to_item(request: AddToCartRequest) -> CartItem:
    return CartItem(
        id=request.id,
        title=request.title,
        price_usd=request.price_usd,
        quantity=request.quantity,
        store_id=request.store_id,
        store_name=request.store_name,
        image_url=request.image_url,
    )


@router.get("/cart")
async def get_cart(
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    try:
        cart = await cart_manager.get_cart(owner_id)
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)


@router.post("/cart/items")
async def add_to_cart(
    request: AddToCartRequest,
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    """Add item; an item already in the cart gets +1. 409 on store conflict."""
    try:
        cart = await cart_manager.add_item(owner_id, _to_item(request))
    except CartStoreConflictError as e:
        raise _conflict(e)
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)


@router.post("/cart/items/replace")
async def replace_cart(
    request: AddToCartRequest,
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    """Empty the cart and add the item (accepting a store switch)."""
    try:
        cart = await cart_manager.replace_with(owner_id, _to_item(request))
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)


@router.patch("/cart/items/{item_id}")
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    """Set quantity (values below 1 are stored as 1)."""
    try:
        cart = await cart_manager.update_quantity(owner_id, item_id, request.quantity)
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)


@router.delete("/cart/items/{item_id}")
async def remove_cart_item(
    item_id: str,
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    try:
        cart = await cart_manager.remove_item(owner_id, item_id)
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)


@router.delete("/cart")
async def clear_cart(
    owner_id: str = Depends(get_cart_owner),
    cart_manager: CartManager = Depends(get_cart_manager_dep),
    currency: CurrencyService = Depends(get_currency_service_dep),
):
    try:
        cart = await cart_manager.clear_cart(owner_id)
    except CartStorageError as e:
        raise _unavailable(e)
    return await _respond(cart, currency)
