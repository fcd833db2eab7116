"""
API Pydantic Models

Request bodies for all endpoints.
"""
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    id: str = Field(min_length=1)
    title: str
    price_usd: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    store_id: str = ""
    store_name: str = ""
    image_url: str = ""


class UpdateCartItemRequest(BaseModel):
    quantity: int


# ==================== CHECKOUT MODELS ====================

class CheckoutRequest(BaseModel):
    buyer_name: str = ""
    buyer_phone: str = ""
    buyer_address: str = ""
    delivery_method: Literal["delivery", "pickup"] = "delivery"
    payment_method: str = ""


# ==================== REVIEW MODELS ====================

class ReviewRequest(BaseModel):
    rating: int = 0
    comment: str = ""
    store_id: Optional[str] = None


# ==================== PUSH MODELS ====================

class PushSubscriptionRequest(BaseModel):
    endpoint: str
    p256dh: str
    auth: str


class PushUnsubscribeRequest(BaseModel):
    endpoint: str


class SendPushRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    message: str = ""
    user_id: Optional[str] = Field(default=None, alias="userId")
    email: Optional[str] = None
    url: Optional[str] = None


class CreateNotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: Literal["info", "success", "warning", "error"] = "info"
    link: Optional[str] = None
