"""Authentication package."""
from .service_key import verify_service_key
from .supabase import AuthUser, get_optional_user, require_user

__all__ = [
    "AuthUser",
    "get_optional_user",
    "require_user",
    "verify_service_key",
]
