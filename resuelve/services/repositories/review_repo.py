"""Review Repository - product reviews and author profiles."""
from typing import List, Optional

from resuelve.services.models import Review

from .base import BaseRepository

DEFAULT_AUTHOR_NAME = "Usuario"


class ReviewRepository(BaseRepository):
    """Review database operations."""

    async def create(
        self,
        user_id: str,
        product_id: str,
        store_id: Optional[str],
        rating: int,
        comment: str = "",
    ) -> Review:
        data = {
            "user_id": user_id,
            "product_id": product_id,
            "store_id": store_id,
            "rating": rating,
            "comment": comment,
        }
        result = await self.client.table("reviews").insert(data).execute()
        return Review(**result.data[0])

    async def get_by_product(self, product_id: str) -> List[Review]:
        """Reviews newest first, with author names from profiles."""
        result = (
            await self.client.table("reviews")
            .select("*")
            .eq("product_id", product_id)
            .order("created_at", desc=True)
            .execute()
        )
        rows = result.data or []
        if not rows:
            return []

        user_ids = list({r["user_id"] for r in rows if r.get("user_id")})
        names = {}
        if user_ids:
            profiles = (
                await self.client.table("profiles").select("id, full_name").in_("id", user_ids).execute()
            )
            names = {p["id"]: p.get("full_name") for p in profiles.data or []}

        return [
            Review(**r, author_name=names.get(r.get("user_id")) or DEFAULT_AUTHOR_NAME)
            for r in rows
        ]

    async def get_ratings(self, product_id: str) -> List[int]:
        result = await self.client.table("reviews").select("rating").eq("product_id", product_id).execute()
        return [int(r["rating"]) for r in result.data or [] if r.get("rating") is not None]
