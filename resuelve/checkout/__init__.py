"""Checkout package: form validation, order message and submission."""
from .message import build_order_message, generate_whatsapp_link, payment_label
from .service import CheckoutResult, CheckoutService, CheckoutSummary, build_order_items
from .validation import PICKUP_ADDRESS, CheckoutForm, DeliveryMethod, validate_checkout

__all__ = [
    "CheckoutForm",
    "CheckoutResult",
    "CheckoutService",
    "CheckoutSummary",
    "DeliveryMethod",
    "PICKUP_ADDRESS",
    "build_order_items",
    "build_order_message",
    "generate_whatsapp_link",
    "payment_label",
    "validate_checkout",
]
