"""
Checkout Router

Summary before confirmation and order submission.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException

from resuelve.auth import AuthUser, get_optional_user, require_user
from resuelve.checkout import CheckoutForm, CheckoutService
from resuelve.errors import CartStorageError, CheckoutValidationError, OrderSubmissionError
from resuelve.logging import get_logger

from resuelve.services.database import Database

from .deps import get_cart_owner, get_checkout_service, get_db
from .models import CheckoutRequest

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


@router.get("/checkout/summary")
async def get_checkout_summary(
    delivery_method: Literal["delivery", "pickup"] = "delivery",
    owner_id: str = Depends(get_cart_owner),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Subtotal, delivery fee, total (USD and Bs) and store payment methods."""
    try:
        summary = await checkout.get_summary(owner_id, delivery_method)
    except CartStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return summary.to_dict()


@router.post("/checkout")
async def submit_checkout(
    request: CheckoutRequest,
    owner_id: str = Depends(get_cart_owner),
    user: Optional[AuthUser] = Depends(get_optional_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """
    Place the order.

    400: validation failure (first missing field)
    502: order procedure failed, cart kept
    """
    form = CheckoutForm(
        buyer_name=request.buyer_name,
        buyer_phone=request.buyer_phone,
        buyer_address=request.buyer_address,
        delivery_method=request.delivery_method,
        payment_method=request.payment_method,
        buyer_id=user.id if user else None,
    )

    try:
        result = await checkout.submit(owner_id, form)
    except CheckoutValidationError as e:
        raise HTTPException(status_code=400, detail={"field": e.field, "message": e.message})
    except OrderSubmissionError as e:
        raise HTTPException(status_code=502, detail=e.message)
    except CartStorageError as e:
        logger.error(f"Cart storage failure during checkout: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail=str(e))

    return result.to_dict()


@router.get("/checkout/addresses")
async def get_saved_addresses(
    user: AuthUser = Depends(require_user),
    db: Database = Depends(get_db),
):
    """Buyer's saved delivery addresses to prefill the form."""
    addresses = await db.get_addresses(user.id)
    return {"addresses": [a.model_dump() for a in addresses]}
