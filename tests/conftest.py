"""Pytest configuration and fixtures"""
import os
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("ADMIN_API_KEY", "test_admin_key")
os.environ.setdefault("VAPID_PRIVATE_KEY", "test_vapid_key")
os.environ.setdefault("CART_STORAGE", "memory")

from resuelve.cart import CartItem, CartManager, MemoryCartStorage  # noqa: E402


def make_result(data=None):
    """Result object as returned by an awaited supabase execute()."""
    result = Mock()
    result.data = data if data is not None else []
    return result


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client: query builders chain, execute() is awaited."""
    client = Mock()

    table_mock = Mock()
    for method in ("select", "insert", "update", "delete", "upsert", "eq", "in_", "limit", "order"):
        getattr(table_mock, method).return_value = table_mock
    table_mock.execute = AsyncMock(return_value=make_result())

    rpc_mock = Mock()
    rpc_mock.execute = AsyncMock(return_value=make_result())

    client.table.return_value = table_mock
    client.rpc.return_value = rpc_mock

    return client


@pytest.fixture
def mock_database(mock_supabase_client):
    """Database facade over the mocked client"""
    from resuelve.services.database import Database

    return Database(mock_supabase_client)


@pytest.fixture
def cart_storage():
    return MemoryCartStorage()


@pytest.fixture
def cart_manager(cart_storage):
    return CartManager(storage=cart_storage)


@pytest.fixture
def mock_currency():
    """Currency service pinned to a known rate"""
    currency = Mock()
    currency.get_exchange_rate = AsyncMock(return_value=40.0)
    return currency


@pytest.fixture
def sample_store():
    """Sample store row"""
    return {
        "id": "store-1",
        "name": "Bodega Falcón",
        "slug": "bodega-falcon",
        "phone_number": "584141234567",
        "delivery_fee": 2.5,
        "exchange_rate_bs": 40.0,
        "lat": 11.41,
        "lng": -69.68,
        "is_open": True,
        "is_banned": False,
    }


@pytest.fixture
def harina():
    return CartItem(
        id="p1",
        title="Harina PAN",
        price_usd=5,
        quantity=2,
        store_id="store-1",
        store_name="Bodega Falcón",
    )


@pytest.fixture
def queso():
    return CartItem(
        id="p2",
        title="Queso llanero",
        price_usd=3,
        quantity=1,
        store_id="store-1",
        store_name="Bodega Falcón",
    )
