"""Buyer order history."""
from typing import Optional

from resuelve.checkout.message import generate_whatsapp_link
from resuelve.services.database import Database
from resuelve.services.models import Order, OrderItem
from resuelve.services.money import to_float

ORDER_STATUS_LABELS = {
    "pending": "Pendiente",
    "paid": "Pagado",
    "delivered": "Entregado",
}


def status_label(status: str) -> str:
    return ORDER_STATUS_LABELS.get(status, status)


def build_inquiry_message(order_id: str) -> str:
    """Buyer question to the seller about an existing order."""
    return f"Hola, tengo una consulta sobre mi pedido #{order_id[:4]}"


def _order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "store_id": order.store_id,
        "store_name": order.store_name,
        "status": order.status,
        "status_label": status_label(order.status),
        "total_usd": to_float(order.total_usd),
        "total_bs": to_float(order.total_bs),
        "payment_method": order.payment_method,
        "delivery_method": order.delivery_method,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


def _item_to_dict(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "title": item.title,
        "quantity": item.quantity,
        "price_at_time_usd": to_float(item.price_at_time_usd),
        "line_total_usd": to_float(item.line_total_usd),
    }


class OrderHistoryService:
    def __init__(self, db: Database):
        self.db = db

    async def list_for_buyer(self, buyer_id: str) -> list:
        orders = await self.db.get_buyer_orders(buyer_id)
        return [_order_to_dict(o) for o in orders]

    async def get_for_buyer(self, buyer_id: str, order_id: str) -> Optional[dict]:
        """
        Order detail with items and a WhatsApp link to the store.

        Returns None when the order does not exist or belongs to someone else.
        """
        found = await self.db.get_buyer_order(order_id, buyer_id)
        if found is None:
            return None

        order, items = found
        return {
            **_order_to_dict(order),
            "buyer_name": order.buyer_name,
            "buyer_address": order.buyer_address,
            "store_image_url": order.store_image_url,
            "items": [_item_to_dict(i) for i in items],
            "contact_url": (
                generate_whatsapp_link(order.store_phone, build_inquiry_message(order.id))
                if order.store_phone
                else None
            ),
        }
