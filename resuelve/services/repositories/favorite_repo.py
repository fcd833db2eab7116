"""Favorite Repository - products a buyer saved."""
from typing import Any, Dict, List

from .base import BaseRepository


class FavoriteRepository(BaseRepository):
    async def get_products(self, user_id: str) -> List[Dict[str, Any]]:
        """Favorite products with their store name and rate."""
        result = (
            await self.client.table("favorites")
            .select("*, products(*, stores(name, exchange_rate_bs))")
            .eq("user_id", user_id)
            .execute()
        )
        # Deleted products leave a null embed behind
        return [f["products"] for f in result.data or [] if f.get("products")]

    async def exists(self, user_id: str, product_id: str) -> bool:
        result = (
            await self.client.table("favorites")
            .select("product_id")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    async def add(self, user_id: str, product_id: str) -> None:
        data = {"user_id": user_id, "product_id": product_id}
        await self.client.table("favorites").upsert(data, on_conflict="user_id,product_id").execute()

    async def remove(self, user_id: str, product_id: str) -> None:
        await (
            self.client.table("favorites")
            .delete()
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .execute()
        )
