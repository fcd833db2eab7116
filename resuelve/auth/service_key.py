"""Service key validation for internal endpoints (push dispatch)."""
import os

from fastapi import Header, HTTPException


async def verify_service_key(
    authorization: str = Header(None, alias="Authorization"),
):
    """
    Verify ADMIN_API_KEY for back-office callers.

    Use for endpoints that act on behalf of the platform, not a buyer.
    """
    admin_key = os.environ.get("ADMIN_API_KEY", "")

    if not admin_key:
        raise HTTPException(status_code=500, detail="ADMIN_API_KEY not configured")

    if authorization != f"Bearer {admin_key}":
        raise HTTPException(status_code=403, detail="Invalid service key")

    return True
