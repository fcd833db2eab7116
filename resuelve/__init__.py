"""
Resuelve Marketplace Core

This package contains:
- db: Supabase and Redis clients
- cart: persisted single-store cart
- checkout: order validation, submission and WhatsApp link
- services: money, currency, geofencing, reviews, notifications
- routers: FastAPI endpoints

Imports are lazy to keep serverless cold starts cheap.
"""

__all__ = [
    "get_supabase",
    "get_redis",
    "get_cart_manager",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_supabase":
        from resuelve.db import get_supabase
        return get_supabase
    elif name == "get_redis":
        from resuelve.db import get_redis
        return get_redis
    elif name == "get_cart_manager":
        from resuelve.cart import get_cart_manager
        return get_cart_manager
    raise AttributeError(f"module 'resuelve' has no attribute '{name}'")
