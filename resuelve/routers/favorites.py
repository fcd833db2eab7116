"""Favorites endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from resuelve.auth import AuthUser, get_optional_user, require_user
from resuelve.errors import ERROR_LOGIN_REQUIRED
from resuelve.services.favorites import FavoriteService

from .deps import get_favorite_service

router = APIRouter(tags=["favorites"])


@router.get("/favorites")
async def list_favorites(
    user: AuthUser = Depends(require_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    return {"products": await favorites.list_products(user.id)}


@router.get("/favorites/{product_id}")
async def get_favorite_status(
    product_id: str,
    user: Optional[AuthUser] = Depends(get_optional_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    # Anonymous visitors simply have no favorites
    if user is None:
        return {"product_id": product_id, "is_favorite": False}
    return {"product_id": product_id, "is_favorite": await favorites.is_favorite(user.id, product_id)}


@router.post("/favorites/{product_id}/toggle")
async def toggle_favorite(
    product_id: str,
    user: Optional[AuthUser] = Depends(get_optional_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_LOGIN_REQUIRED)

    is_favorite = await favorites.toggle(user.id, product_id)
    return {
        "product_id": product_id,
        "is_favorite": is_favorite,
        "message": "Agregado a favoritos" if is_favorite else "Eliminado de favoritos",
    }
