"""
Checkout Service

Turns the buyer's cart and form into a create_order call and a WhatsApp
confirmation link. The cart is cleared only after the order procedure
succeeds.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

import httpx
from postgrest.exceptions import APIError

from resuelve.cart.models import Cart
from resuelve.cart.service import CartManager
from resuelve.errors import ERROR_ORDER_FAILED, CartStorageError, OrderSubmissionError
from resuelve.logging import get_logger, sanitize_id_for_logging
from resuelve.realtime import emit_order_created
from resuelve.services.currency import CurrencyService
from resuelve.services.database import Database
from resuelve.services.models import PaymentMethod, Store
from resuelve.services.money import multiply, to_decimal, to_float

from .message import DEFAULT_STORE_PHONE, build_order_message, generate_whatsapp_link
from .validation import CheckoutForm, validate_checkout

logger = get_logger(__name__)


@dataclass
class CheckoutSummary:
    """Totals shown before the buyer confirms."""
    store_id: Optional[str]
    subtotal_usd: Decimal
    delivery_fee_usd: Decimal
    total_usd: Decimal
    exchange_rate: float
    payment_methods: List[PaymentMethod] = field(default_factory=list)

    def to_dict(self) -> dict:
        rate = self.exchange_rate
        return {
            "store_id": self.store_id,
            "exchange_rate": rate,
            "subtotal_usd": to_float(self.subtotal_usd),
            "subtotal_bs": to_float(multiply(self.subtotal_usd, rate)),
            "delivery_fee_usd": to_float(self.delivery_fee_usd),
            "delivery_fee_bs": to_float(multiply(self.delivery_fee_usd, rate)),
            "total_usd": to_float(self.total_usd),
            "total_bs": to_float(multiply(self.total_usd, rate)),
            "payment_methods": [m.model_dump() for m in self.payment_methods],
        }


@dataclass
class CheckoutResult:
    order: Any
    order_id: Optional[str]
    whatsapp_url: str
    total_usd: Decimal
    total_bs: Decimal
    exchange_rate: float

    def to_dict(self) -> dict:
        return {
            "success": True,
            "order_id": self.order_id,
            "whatsapp_url": self.whatsapp_url,
            "total_usd": to_float(self.total_usd),
            "total_bs": to_float(self.total_bs),
            "exchange_rate": self.exchange_rate,
        }


def build_order_items(cart: Cart) -> List[dict]:
    """Line items in the shape create_order expects."""
    return [
        {
            "product_id": item.id,
            "quantity": item.quantity,
            "price_at_time_usd": to_float(item.price_usd),
            "title": item.title,
        }
        for item in cart.items
    ]


def _extract_order_id(order: Any) -> Optional[str]:
    if isinstance(order, list):
        order = order[0] if order else None
    if isinstance(order, dict):
        order_id = order.get("id")
        return str(order_id) if order_id is not None else None
    if isinstance(order, str):
        return order
    return None


class CheckoutService:
    """Checkout aggregator: validation, totals, order RPC, deep link."""

    def __init__(self, db: Database, cart_manager: CartManager, currency: CurrencyService):
        self.db = db
        self.cart_manager = cart_manager
        self.currency = currency

    async def get_summary(self, owner_id: str, delivery_method: str = "delivery") -> CheckoutSummary:
        cart = await self.cart_manager.get_cart(owner_id)
        rate = await self.currency.get_exchange_rate()
        subtotal = cart.total_usd()

        store: Optional[Store] = None
        payment_methods: List[PaymentMethod] = []
        if cart.store_id:
            store = await self.db.get_store(cart.store_id)
            payment_methods = await self.db.get_payment_methods(cart.store_id)

        delivery_fee = Decimal("0")
        if delivery_method == "delivery" and store:
            delivery_fee = to_decimal(store.delivery_fee)

        return CheckoutSummary(
            store_id=cart.store_id,
            subtotal_usd=subtotal,
            delivery_fee_usd=delivery_fee,
            total_usd=subtotal + delivery_fee,
            exchange_rate=rate,
            payment_methods=payment_methods,
        )

    async def submit(self, owner_id: str, form: CheckoutForm) -> CheckoutResult:
        """
        Validate, create the order, clear the cart and build the link.

        Raises:
            CheckoutValidationError: a required field is missing
            OrderSubmissionError: create_order failed; the cart is kept
        """
        cart = await self.cart_manager.get_cart(owner_id)
        validate_checkout(cart, form)

        rate = await self.currency.get_exchange_rate()
        total_usd = cart.total_usd()
        total_bs = multiply(total_usd, rate)
        store_id = cart.store_id

        try:
            order = await self.db.create_order(
                store_id=store_id,
                buyer_name=form.buyer_name.strip(),
                buyer_phone=form.buyer_phone.strip(),
                buyer_address=form.order_address,
                buyer_id=form.buyer_id,
                total_usd=to_float(total_usd),
                total_bs=to_float(total_bs),
                payment_method=form.payment_method,
                delivery_method=form.delivery_method,
                items=build_order_items(cart),
            )
        except APIError as e:
            logger.error(f"create_order rejected for store {sanitize_id_for_logging(store_id)}: {e.message}")
            raise OrderSubmissionError(e.message or ERROR_ORDER_FAILED) from e
        except httpx.HTTPError as e:
            logger.error(f"create_order unreachable: {e}")
            raise OrderSubmissionError(ERROR_ORDER_FAILED) from e

        if not order:
            logger.error("create_order returned no order")
            raise OrderSubmissionError(ERROR_ORDER_FAILED)

        order_id = _extract_order_id(order)
        logger.info(
            f"Order {sanitize_id_for_logging(order_id)} created for store "
            f"{sanitize_id_for_logging(store_id)}: ${to_float(total_usd):.2f}"
        )

        phone = await self._get_store_phone(store_id)
        message = build_order_message(cart.items, total_usd, total_bs, form)
        whatsapp_url = generate_whatsapp_link(phone, message)

        try:
            await self.cart_manager.clear_cart(owner_id)
        except CartStorageError as e:
            # Order already exists at this point
            logger.error(f"Order placed but cart not cleared: {e}")
        await emit_order_created(store_id, order_id, to_float(total_usd), to_float(total_bs))

        return CheckoutResult(
            order=order,
            order_id=order_id,
            whatsapp_url=whatsapp_url,
            total_usd=total_usd,
            total_bs=total_bs,
            exchange_rate=rate,
        )

    async def _get_store_phone(self, store_id: str) -> str:
        """Seller phone for the deep link. The order already exists, so lookup
        failures fall back to the default number."""
        try:
            store = await self.db.get_store(store_id)
        except (APIError, httpx.HTTPError) as e:
            logger.warning(f"Failed to load store phone: {e}")
            return DEFAULT_STORE_PHONE
        return (store.phone_number if store else None) or DEFAULT_STORE_PHONE
