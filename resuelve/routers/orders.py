"""
Order History Router

Signed-in buyer's past orders and order detail.
"""
from fastapi import APIRouter, Depends, HTTPException

from resuelve.auth import AuthUser, require_user
from resuelve.errors import ERROR_ORDER_NOT_FOUND
from resuelve.services.orders import OrderHistoryService

from .deps import get_order_history_service

router = APIRouter(tags=["orders"])


@router.get("/orders")
async def list_orders(
    user: AuthUser = Depends(require_user),
    orders: OrderHistoryService = Depends(get_order_history_service),
):
    return {"orders": await orders.list_for_buyer(user.id)}


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    user: AuthUser = Depends(require_user),
    orders: OrderHistoryService = Depends(get_order_history_service),
):
    """Order with items. Someone else's order is reported as not found."""
    order = await orders.get_for_buyer(user.id, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=ERROR_ORDER_NOT_FOUND)
    return order
