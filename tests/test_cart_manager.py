"""
Tests for CartManager persistence
"""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from resuelve.cart import CartItem, CartManager, MemoryCartStorage
from resuelve.cart.storage import CartPayloadError, upgrade_payload
from resuelve.errors import CartStorageError, CartStoreConflictError


@pytest.mark.asyncio
async def test_mutations_are_written_through(cart_manager, cart_storage, harina):
    """Every mutation is persisted under the resuelve-cart namespace."""
    await cart_manager.add_item("device-1", harina)

    stored = json.loads(cart_storage.blobs["resuelve-cart:device-1"])
    assert stored["version"] == 2
    assert stored["items"][0]["id"] == "p1"
    assert stored["items"][0]["quantity"] == 2


@pytest.mark.asyncio
async def test_cart_survives_new_manager(cart_storage, harina, queso):
    """A fresh manager over the same storage sees the same cart."""
    first = CartManager(storage=cart_storage)
    await first.add_item("device-1", harina)
    await first.add_item("device-1", queso)

    second = CartManager(storage=cart_storage)
    cart = await second.get_cart("device-1")

    assert cart.total_usd() == 13


@pytest.mark.asyncio
async def test_carts_are_isolated_per_owner(cart_manager, harina):
    await cart_manager.add_item("device-1", harina)

    other = await cart_manager.get_cart("device-2")
    assert other.is_empty


@pytest.mark.asyncio
async def test_update_and_remove(cart_manager, harina, queso):
    await cart_manager.add_item("device-1", harina)
    await cart_manager.add_item("device-1", queso)

    await cart_manager.update_quantity("device-1", "p2", 4)
    cart = await cart_manager.remove_item("device-1", "p1")

    assert [item.id for item in cart.items] == ["p2"]
    assert (await cart_manager.get_cart("device-1")).total_usd() == 12


@pytest.mark.asyncio
async def test_clear_cart_deletes_blob(cart_manager, cart_storage, harina):
    await cart_manager.add_item("device-1", harina)
    cart = await cart_manager.clear_cart("device-1")

    assert cart.total_usd() == 0
    assert "resuelve-cart:device-1" not in cart_storage.blobs


@pytest.mark.asyncio
async def test_store_conflict_leaves_stored_cart_untouched(cart_manager, cart_storage, harina):
    await cart_manager.add_item("device-1", harina)
    before = cart_storage.blobs["resuelve-cart:device-1"]

    other = CartItem(id="p7", title="Pan", price_usd=1, store_id="store-2", store_name="Panadería")
    with pytest.raises(CartStoreConflictError):
        await cart_manager.add_item("device-1", other)

    assert cart_storage.blobs["resuelve-cart:device-1"] == before


@pytest.mark.asyncio
async def test_replace_with_after_conflict(cart_manager, harina):
    await cart_manager.add_item("device-1", harina)

    other = CartItem(id="p7", title="Pan", price_usd=1, store_id="store-2", store_name="Panadería")
    cart = await cart_manager.replace_with("device-1", other)

    assert cart.store_id == "store-2"
    assert cart.total_usd() == 1


@pytest.mark.asyncio
async def test_legacy_payload_is_upgraded(cart_storage):
    """Unversioned web-client blob (persist wrapper, camelCase) loads."""
    legacy = {"state": {"items": [
        {"id": "p1", "title": "Harina", "priceUsd": 5, "storeName": "Bodega", "quantity": 2},
    ]}}
    cart_storage.blobs["resuelve-cart:device-1"] = json.dumps(legacy)

    cart = await CartManager(storage=cart_storage).get_cart("device-1")

    assert cart.total_usd() == 10
    assert cart.items[0].store_name == "Bodega"


@pytest.mark.asyncio
async def test_corrupted_payload_is_discarded(cart_manager, cart_storage):
    cart_storage.blobs["resuelve-cart:device-1"] = "{not json"

    cart = await cart_manager.get_cart("device-1")

    assert cart.is_empty
    assert "resuelve-cart:device-1" not in cart_storage.blobs


@pytest.mark.asyncio
async def test_storage_failure_raises_cart_storage_error():
    storage = Mock()
    storage.load = AsyncMock(side_effect=ConnectionError("redis down"))

    with pytest.raises(CartStorageError):
        await CartManager(storage=storage).get_cart("device-1")


class TestUpgradePayload:
    def test_bare_list(self):
        payload = upgrade_payload([{"id": "p1"}], "device-1")
        assert payload == {
            "version": 2,
            "owner_id": "device-1",
            "items": [{"id": "p1"}],
            "created_at": "",
            "updated_at": "",
        }

    def test_current_version_passes_through(self):
        payload = {"version": 2, "owner_id": "device-1", "items": []}
        assert upgrade_payload(payload, "device-1") is payload

    def test_future_version_rejected(self):
        with pytest.raises(CartPayloadError):
            upgrade_payload({"version": 99, "items": []}, "device-1")

    def test_non_list_items_rejected(self):
        with pytest.raises(CartPayloadError):
            upgrade_payload({"items": "p1"}, "device-1")


def test_memory_storage_is_default_in_tests(monkeypatch):
    from resuelve.cart.storage import create_cart_storage

    monkeypatch.setenv("CART_STORAGE", "memory")
    assert isinstance(create_cart_storage(), MemoryCartStorage)
