"""
Common Error Constants and Domain Exceptions

Centralized error messages (shown to buyers as-is, in Spanish) and the
exceptions raised by the cart and checkout layers.
"""

# Checkout validation (in the order they are checked)
ERROR_CART_EMPTY = "Tu carrito está vacío."
ERROR_NAME_REQUIRED = "Por favor ingresa tu nombre."
ERROR_PHONE_REQUIRED = "Por favor ingresa tu teléfono."
ERROR_ADDRESS_REQUIRED = "Por favor ingresa tu dirección de entrega."
ERROR_PAYMENT_METHOD_REQUIRED = "Por favor selecciona un método de pago."
ERROR_INVALID_DELIVERY_METHOD = "Método de entrega inválido."

# Order errors
ERROR_ORDER_FAILED = "Error al procesar el pedido. Intenta de nuevo."
ERROR_ORDER_NOT_FOUND = "Pedido no encontrado"

# Review errors
ERROR_RATING_REQUIRED = "Por favor selecciona una calificación"
ERROR_LOGIN_REQUIRED_REVIEW = "Debes iniciar sesión para dejar una reseña"

# Push errors
ERROR_PUSH_MISSING_CONTENT = "Missing title or message"
ERROR_PUSH_USER_NOT_FOUND = "User not found with that email"
ERROR_PUSH_TARGET_REQUIRED = "Target User ID or Email required"
ERROR_PUSH_NO_SUBSCRIPTIONS = "User has no active subscriptions"

# Generic errors
ERROR_LOGIN_REQUIRED = "Debes iniciar sesión"
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_CART_UNAVAILABLE = "Cart service unavailable"


class CartStoreConflictError(Exception):
    """Raised when an item from a different store is added to a non-empty cart."""

    def __init__(self, current_store_name: str, new_store_name: str):
        self.current_store_name = current_store_name
        self.new_store_name = new_store_name
        super().__init__(
            f"Tu carrito tiene productos de {current_store_name}. "
            "Solo puedes pedir de una tienda a la vez."
        )


class CartStorageError(Exception):
    """Raised when the cart cannot be read from or written to storage."""


class CheckoutValidationError(Exception):
    """First missing or invalid checkout field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class OrderSubmissionError(Exception):
    """The remote order procedure failed; the cart is left untouched."""

    def __init__(self, message: str = ERROR_ORDER_FAILED):
        self.message = message
        super().__init__(message)


class PushDispatchError(Exception):
    """Push request rejected before anything was sent."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)
