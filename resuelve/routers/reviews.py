"""
Review endpoints.

Product reviews with average rating.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from resuelve.auth import AuthUser, get_optional_user
from resuelve.errors import ERROR_LOGIN_REQUIRED_REVIEW
from resuelve.logging import get_logger
from resuelve.services.reviews import ReviewService

from .deps import get_review_service
from .models import ReviewRequest

logger = get_logger(__name__)

router = APIRouter(tags=["reviews"])


@router.get("/products/{product_id}/reviews")
async def list_reviews(product_id: str, reviews: ReviewService = Depends(get_review_service)):
    return await reviews.list_for_product(product_id)


@router.post("/products/{product_id}/reviews", status_code=201)
async def submit_review(
    product_id: str,
    request: ReviewRequest,
    user: Optional[AuthUser] = Depends(get_optional_user),
    reviews: ReviewService = Depends(get_review_service),
):
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_LOGIN_REQUIRED_REVIEW)

    try:
        return await reviews.submit(
            user_id=user.id,
            product_id=product_id,
            rating=request.rating,
            store_id=request.store_id,
            comment=request.comment,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
