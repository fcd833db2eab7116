"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from resuelve.errors import CartStoreConflictError
from resuelve.services.money import multiply, to_decimal, total

# Version of the persisted cart blob, see storage.upgrade_payload
CART_SCHEMA_VERSION = 2


@dataclass
class CartItem:
    """Product snapshot taken when it was added to the cart."""
    id: str
    title: str
    price_usd: Decimal
    quantity: int = 1
    store_id: str = ""
    store_name: str = ""
    image_url: str = ""

    def __post_init__(self):
        self.price_usd = to_decimal(self.price_usd)

    @property
    def line_total_usd(self) -> Decimal:
        return multiply(self.price_usd, self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "price_usd": str(self.price_usd),
            "quantity": self.quantity,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from dictionary. Accepts the web client's camelCase keys too."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            price_usd=to_decimal(data.get("price_usd", data.get("priceUsd"))),
            quantity=int(data.get("quantity", 1)),
            store_id=data.get("store_id") or data.get("storeId") or "",
            store_name=data.get("store_name") or data.get("storeName") or "",
            image_url=data.get("image_url") or data.get("imageUrl") or "",
        )


@dataclass
class Cart:
    """
    Single-store shopping cart.

    Mutations here are pure and in-memory; CartManager writes every change
    through to storage.
    """
    owner_id: str
    items: List[CartItem] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        now = datetime.now(timezone.utc).isoformat()
        if not self.created_at:
            self.created_at = now
        if not self.updated_at:
            self.updated_at = now

    @property
    def store_id(self) -> Optional[str]:
        """Store every item belongs to, None for an empty cart."""
        return self.items[0].store_id if self.items else None

    @property
    def store_name(self) -> Optional[str]:
        return self.items[0].store_name if self.items else None

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def add_item(self, item: CartItem) -> None:
        """
        Add a product to the cart.

        An id already in the cart gets its quantity bumped by one, whatever
        quantity the incoming item carries. A new id is appended as given.

        Raises:
            CartStoreConflictError: item belongs to a different store than
                the items already in the cart
        """
        current_store = self.store_id
        if current_store and item.store_id and item.store_id != current_store:
            raise CartStoreConflictError(self.store_name or "", item.store_name)

        existing = self.get_item(item.id)
        if existing:
            existing.quantity += 1
            return

        self.items.append(item)

    def replace_with(self, item: CartItem) -> None:
        """Empty the cart and add item (resolves a store conflict)."""
        self.clear()
        self.items.append(item)

    def remove_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Set quantity directly, clamped to at least 1. Unknown ids are ignored."""
        existing = self.get_item(item_id)
        if existing:
            existing.quantity = max(1, int(quantity))

    def clear(self) -> None:
        self.items = []

    def total_usd(self) -> Decimal:
        """Sum of price_usd * quantity over all items."""
        return total(item.line_total_usd for item in self.items)

    def to_dict(self) -> dict:
        """Convert to the versioned storage payload."""
        return {
            "version": CART_SCHEMA_VERSION,
            "owner_id": self.owner_id,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        """Create from a current-version payload (see storage.upgrade_payload)."""
        return cls(
            owner_id=data["owner_id"],
            items=[CartItem.from_dict(item) for item in data.get("items", [])],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )
