"""Buyer favorite products."""
from resuelve.logging import get_logger, sanitize_id_for_logging
from resuelve.services.database import Database

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, db: Database):
        self.db = db

    async def list_products(self, user_id: str) -> list:
        return await self.db.get_favorite_products(user_id)

    async def is_favorite(self, user_id: str, product_id: str) -> bool:
        return await self.db.is_favorite(user_id, product_id)

    async def toggle(self, user_id: str, product_id: str) -> bool:
        """Flip the favorite flag and return the new state."""
        if await self.db.is_favorite(user_id, product_id):
            await self.db.remove_favorite(user_id, product_id)
            logger.info(f"Favorite removed: {sanitize_id_for_logging(product_id)}")
            return False
        await self.db.add_favorite(user_id, product_id)
        logger.info(f"Favorite added: {sanitize_id_for_logging(product_id)}")
        return True
