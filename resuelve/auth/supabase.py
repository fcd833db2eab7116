"""Supabase access-token authentication."""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from resuelve.db import get_supabase
from resuelve.errors import ERROR_UNAUTHORIZED
from resuelve.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AuthUser:
    id: str
    email: Optional[str] = None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


async def get_optional_user(
    authorization: str = Header(None, alias="Authorization"),
) -> Optional[AuthUser]:
    """
    Resolve the buyer from `Authorization: Bearer <access_token>`.

    Anonymous requests (no header) return None: buyers may check out
    without an account. A header that fails verification is rejected.
    """
    token = _bearer_token(authorization)
    if token is None:
        if authorization:
            raise HTTPException(status_code=401, detail="Invalid authorization header")
        return None

    try:
        client = await get_supabase()
        response = await client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Supabase token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid access token")

    if not response or not response.user:
        raise HTTPException(status_code=401, detail="Invalid access token")

    return AuthUser(id=response.user.id, email=response.user.email)


async def require_user(user: Optional[AuthUser] = Depends(get_optional_user)) -> AuthUser:
    """Same as get_optional_user but anonymous requests get 401."""
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)
    return user
