"""Product reviews and rating aggregation."""
from typing import Optional

from resuelve.errors import ERROR_RATING_REQUIRED
from resuelve.logging import get_logger, sanitize_id_for_logging
from resuelve.services.database import Database

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    def __init__(self, db: Database):
        self.db = db

    async def submit(
        self,
        user_id: str,
        product_id: str,
        rating: int,
        store_id: Optional[str] = None,
        comment: str = "",
    ) -> dict:
        """Insert a review. Raises ValueError when rating is outside 1..5."""
        if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(ERROR_RATING_REQUIRED)

        review = await self.db.create_review(user_id, product_id, store_id, rating, (comment or "").strip())
        logger.info(f"Review {rating}* for product {sanitize_id_for_logging(product_id)}")
        return review.model_dump(mode="json")

    async def list_for_product(self, product_id: str) -> dict:
        reviews = await self.db.get_product_reviews(product_id)
        rating = await self.db.get_product_rating(product_id)
        return {
            "reviews": [r.model_dump(mode="json") for r in reviews],
            "average": rating["average"],
            "count": rating["count"],
        }
