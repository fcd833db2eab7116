"""Order Repository - order creation through the remote procedure."""
from typing import Any, Dict, List, Optional, Tuple

from resuelve.services.models import Order, OrderItem

from .base import BaseRepository

CREATE_ORDER_RPC = "create_order"


class OrderRepository(BaseRepository):
    """Order database operations.

    Stock deduction and order items are written by the create_order
    stored procedure in a single transaction.
    """

    async def create(
        self,
        store_id: str,
        buyer_name: str,
        buyer_phone: str,
        buyer_address: str,
        buyer_id: Optional[str],
        total_usd: float,
        total_bs: float,
        payment_method: str,
        delivery_method: str,
        items: List[Dict[str, Any]],
    ) -> Any:
        """Call create_order and return its opaque result.

        Raises postgrest APIError when the procedure reports an error.
        """
        params = {
            "p_store_id": store_id,
            "p_buyer_name": buyer_name,
            "p_buyer_phone": buyer_phone,
            "p_buyer_address": buyer_address,
            "p_buyer_id": buyer_id,
            "p_total_usd": total_usd,
            "p_total_bs": total_bs,
            "p_payment_method": payment_method,
            "p_delivery_method": delivery_method,
            "p_items": items,
        }
        result = await self.client.rpc(CREATE_ORDER_RPC, params).execute()
        return result.data

    async def get_by_buyer(self, buyer_id: str) -> List[Order]:
        """Buyer's orders, newest first."""
        result = (
            await self.client.table("orders")
            .select("*, stores(name)")
            .eq("buyer_id", buyer_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Order.from_row(row) for row in result.data or []]

    async def get_with_items(self, order_id: str, buyer_id: str) -> Optional[Tuple[Order, List[OrderItem]]]:
        """One order of this buyer with its line items; None if it is not theirs."""
        result = (
            await self.client.table("orders")
            .select("*, stores(name, phone_number, image_url)")
            .eq("id", order_id)
            .eq("buyer_id", buyer_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None

        items = await self.client.table("order_items").select("*").eq("order_id", order_id).execute()
        return Order.from_row(result.data[0]), [OrderItem(**i) for i in items.data or []]
