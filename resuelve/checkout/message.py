"""WhatsApp confirmation message sent by the buyer to the seller."""
from decimal import Decimal
from typing import Iterable
from urllib.parse import quote

from resuelve.cart.models import CartItem
from resuelve.services.money import round_money

from .validation import CheckoutForm, PaymentMethodType

# Used when the store has no phone number on file
DEFAULT_STORE_PHONE = "584120000000"

PAYMENT_LABELS = {
    PaymentMethodType.PAGO_MOVIL.value: "Pago Móvil",
    PaymentMethodType.ZELLE.value: "Zelle",
    PaymentMethodType.BINANCE.value: "Binance",
}
CASH_LABEL = "Efectivo"

# Methods where the buyer sends a payment screenshot
PROOF_REQUIRED_METHODS = {
    PaymentMethodType.PAGO_MOVIL.value,
    PaymentMethodType.ZELLE.value,
    PaymentMethodType.BINANCE.value,
}


def payment_label(payment_method: str) -> str:
    return PAYMENT_LABELS.get(payment_method, CASH_LABEL)


def _plain_number(value: Decimal) -> str:
    """5 -> "5", 5.50 -> "5.5" (no trailing zeros, no exponent)."""
    return format(value.normalize(), "f")


def build_order_message(
    items: Iterable[CartItem],
    total_usd: Decimal,
    total_bs: Decimal,
    form: CheckoutForm,
) -> str:
    items_list = "\n".join(
        f"- {item.quantity}x {item.title} (${_plain_number(item.price_usd)})" for item in items
    )

    message = "*Hola, quiero procesar el siguiente pedido:*\n\n" + items_list + "\n\n"
    message += f"*Total: ${round_money(total_usd)} / Bs {round_money(total_bs)}*\n\n"
    message += f"*Método de pago:* {payment_label(form.payment_method)}\n"

    if form.payment_method in PROOF_REQUIRED_METHODS:
        message += "Adjunto captura del pago en un momento.\n"

    message += "*Método de entrega:* " + ("Delivery" if form.is_delivery else "Pick Up") + "\n"

    if form.is_delivery:
        message += "Adjunto mi ubicación en un momento.\n"
        message += f"Mi dirección escrita es: {form.buyer_address.strip()}"
    else:
        message += "Por favor envíame la ubicación para retirar."

    return message


def generate_whatsapp_link(phone: str, message: str) -> str:
    """wa.me deep link with the message percent-encoded."""
    return f"https://wa.me/{phone}?text={quote(message, safe='')}"
