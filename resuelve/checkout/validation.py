"""Checkout form validation."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from resuelve.cart.models import Cart
from resuelve.errors import (
    ERROR_ADDRESS_REQUIRED,
    ERROR_CART_EMPTY,
    ERROR_INVALID_DELIVERY_METHOD,
    ERROR_NAME_REQUIRED,
    ERROR_PAYMENT_METHOD_REQUIRED,
    ERROR_PHONE_REQUIRED,
    CheckoutValidationError,
)

# Address sent to the order procedure for pickup orders
PICKUP_ADDRESS = "Pick Up"


class DeliveryMethod(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentMethodType(str, Enum):
    PAGO_MOVIL = "pago_movil"
    ZELLE = "zelle"
    BINANCE = "binance"
    CASH = "cash"


@dataclass
class CheckoutForm:
    """Buyer-entered checkout fields."""
    buyer_name: str = ""
    buyer_phone: str = ""
    buyer_address: str = ""
    delivery_method: str = DeliveryMethod.DELIVERY.value
    payment_method: str = ""
    buyer_id: Optional[str] = None

    @property
    def is_delivery(self) -> bool:
        return self.delivery_method == DeliveryMethod.DELIVERY.value

    @property
    def order_address(self) -> str:
        return self.buyer_address.strip() if self.is_delivery else PICKUP_ADDRESS


def _missing(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_checkout(cart: Cart, form: CheckoutForm) -> None:
    """
    Check the form in a fixed order and stop at the first failure:
    cart, name, phone, address (delivery only), payment method. An
    unknown delivery method is rejected right after the cart check.

    Raises:
        CheckoutValidationError: with the failing field and buyer message
    """
    if cart.is_empty:
        raise CheckoutValidationError("cart", ERROR_CART_EMPTY)
    if form.delivery_method not in (DeliveryMethod.DELIVERY.value, DeliveryMethod.PICKUP.value):
        raise CheckoutValidationError("delivery_method", ERROR_INVALID_DELIVERY_METHOD)
    if _missing(form.buyer_name):
        raise CheckoutValidationError("buyer_name", ERROR_NAME_REQUIRED)
    if _missing(form.buyer_phone):
        raise CheckoutValidationError("buyer_phone", ERROR_PHONE_REQUIRED)
    if form.is_delivery and _missing(form.buyer_address):
        raise CheckoutValidationError("buyer_address", ERROR_ADDRESS_REQUIRED)
    if _missing(form.payment_method):
        raise CheckoutValidationError("payment_method", ERROR_PAYMENT_METHOD_REQUIRED)
