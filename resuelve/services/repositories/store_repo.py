"""Store Repository - stores, payment methods and buyer addresses."""
from typing import List, Optional

from resuelve.services.models import Address, PaymentMethod, Store

from .base import BaseRepository


class StoreRepository(BaseRepository):
    """Reads checkout needs from the store side."""

    async def get_by_id(self, store_id: str) -> Optional[Store]:
        result = await self.client.table("stores").select("*").eq("id", store_id).limit(1).execute()
        return Store(**result.data[0]) if result.data else None

    async def get_payment_methods(self, store_id: str) -> List[PaymentMethod]:
        result = await self.client.table("payment_methods").select("*").eq("store_id", store_id).execute()
        return [PaymentMethod(**m) for m in result.data or []]

    async def get_addresses(self, user_id: str) -> List[Address]:
        """Buyer's saved delivery addresses."""
        result = await self.client.table("addresses").select("*").eq("user_id", user_id).execute()
        return [Address(**a) for a in result.data or []]
