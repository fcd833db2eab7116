"""Database Models - Pydantic models for the Supabase tables checkout reads."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from resuelve.services.money import to_decimal as _to_decimal


class Store(BaseModel):
    """Seller store."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    slug: Optional[str] = None
    phone_number: Optional[str] = None
    delivery_fee: Decimal = Decimal("0")
    exchange_rate_bs: Optional[Decimal] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    is_open: bool = True
    is_banned: bool = False

    @field_validator("delivery_fee", mode="before")
    @classmethod
    def convert_fee_to_decimal(cls, v):
        return _to_decimal(v)


class PaymentMethod(BaseModel):
    """Payment method a store accepts (pago_movil, zelle, binance, cash)."""
    model_config = ConfigDict(extra="ignore")

    id: str
    store_id: str
    type: str
    details: Optional[dict[str, Any]] = None


class Address(BaseModel):
    """Buyer saved address."""
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    name: str = ""
    address: str = ""


class Review(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: Optional[str] = None
    product_id: str
    store_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    author_name: str = "Usuario"


class Notification(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: str
    message: str
    type: str = "info"  # info | success | warning | error
    is_read: bool = False
    link: Optional[str] = None
    created_at: Optional[datetime] = None


class PushSubscription(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    endpoint: str
    p256dh: str
    auth: str

    def to_webpush_info(self) -> dict:
        """Shape pywebpush expects for subscription_info."""
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}


class Order(BaseModel):
    """Order row as written by create_order, with the joined store."""
    model_config = ConfigDict(extra="ignore")

    id: str
    store_id: Optional[str] = None
    buyer_id: Optional[str] = None
    buyer_name: str = ""
    buyer_phone: str = ""
    buyer_address: str = ""
    total_usd: Decimal = Decimal("0")
    total_bs: Decimal = Decimal("0")
    status: str = "pending"
    payment_method: Optional[str] = None
    delivery_method: Optional[str] = None
    created_at: Optional[datetime] = None
    store_name: str = ""
    store_phone: Optional[str] = None
    store_image_url: Optional[str] = None

    @field_validator("total_usd", "total_bs", mode="before")
    @classmethod
    def convert_totals_to_decimal(cls, v):
        return _to_decimal(v)

    @classmethod
    def from_row(cls, row: dict) -> "Order":
        """Flatten the `stores(...)` embed PostgREST returns."""
        store = row.get("stores") or {}
        return cls(
            **{k: v for k, v in row.items() if k != "stores"},
            store_name=store.get("name") or "",
            store_phone=store.get("phone_number"),
            store_image_url=store.get("image_url"),
        )


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    order_id: str
    product_id: Optional[str] = None
    title: str = ""
    quantity: int = 1
    price_at_time_usd: Decimal = Decimal("0")

    @field_validator("price_at_time_usd", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @property
    def line_total_usd(self) -> Decimal:
        return self.price_at_time_usd * self.quantity
