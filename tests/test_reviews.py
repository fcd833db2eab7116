"""Tests for product reviews and the order/review repositories"""
from unittest.mock import AsyncMock, Mock

import pytest

from resuelve.errors import ERROR_RATING_REQUIRED
from resuelve.services.models import Review
from resuelve.services.reviews import ReviewService


# ==================== SERVICE ====================

@pytest.fixture
def review_db():
    db = Mock()
    db.create_review = AsyncMock(
        return_value=Review(id="r1", user_id="u1", product_id="p1", store_id="store-1", rating=5, comment="Excelente")
    )
    db.get_product_reviews = AsyncMock(return_value=[])
    db.get_product_rating = AsyncMock(return_value={"average": 0, "count": 0})
    return db


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, -1])
async def test_rating_out_of_range_rejected(review_db, rating):
    service = ReviewService(review_db)

    with pytest.raises(ValueError) as exc_info:
        await service.submit("u1", "p1", rating)

    assert str(exc_info.value) == ERROR_RATING_REQUIRED
    review_db.create_review.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_strips_comment(review_db):
    service = ReviewService(review_db)

    review = await service.submit("u1", "p1", 5, store_id="store-1", comment="  Excelente  ")

    review_db.create_review.assert_awaited_once_with("u1", "p1", "store-1", 5, "Excelente")
    assert review["rating"] == 5
    assert review["author_name"] == "Usuario"


@pytest.mark.asyncio
async def test_list_for_product(review_db):
    review_db.get_product_reviews = AsyncMock(
        return_value=[Review(id="r1", product_id="p1", rating=4, author_name="Ana")]
    )
    review_db.get_product_rating = AsyncMock(return_value={"average": 4.0, "count": 1})

    result = await ReviewService(review_db).list_for_product("p1")

    assert result["average"] == 4.0
    assert result["count"] == 1
    assert result["reviews"][0]["author_name"] == "Ana"


# ==================== DATABASE FACADE ====================

@pytest.mark.asyncio
async def test_product_rating_average(mock_database, mock_supabase_client):
    table = mock_supabase_client.table.return_value
    table.execute.return_value.data = [{"rating": 5}, {"rating": 4}, {"rating": 4}]

    rating = await mock_database.get_product_rating("p1")

    assert rating == {"average": 4.3, "count": 3}


@pytest.mark.asyncio
async def test_product_rating_without_reviews(mock_database):
    assert await mock_database.get_product_rating("p1") == {"average": 0, "count": 0}


@pytest.mark.asyncio
async def test_reviews_joined_with_author_names(mock_database, mock_supabase_client):
    table = mock_supabase_client.table.return_value
    table.execute = AsyncMock(
        side_effect=[
            Mock(data=[
                {"id": "r2", "user_id": "u2", "product_id": "p1", "rating": 3},
                {"id": "r1", "user_id": "u1", "product_id": "p1", "rating": 5},
            ]),
            Mock(data=[{"id": "u1", "full_name": "Ana Rivas"}, {"id": "u2", "full_name": None}]),
        ]
    )

    reviews = await mock_database.get_product_reviews("p1")

    assert [r.id for r in reviews] == ["r2", "r1"]
    assert reviews[0].author_name == "Usuario"
    assert reviews[1].author_name == "Ana Rivas"
    table.order.assert_called_with("created_at", desc=True)


@pytest.mark.asyncio
async def test_create_order_calls_procedure(mock_database, mock_supabase_client):
    mock_supabase_client.rpc.return_value.execute.return_value.data = [{"id": "o1"}]
    items = [{"product_id": "p1", "quantity": 2, "price_at_time_usd": 5.0, "title": "Harina PAN"}]

    order = await mock_database.create_order(
        store_id="store-1",
        buyer_name="María",
        buyer_phone="0412",
        buyer_address="Pick Up",
        buyer_id=None,
        total_usd=10.0,
        total_bs=400.0,
        payment_method="cash",
        delivery_method="pickup",
        items=items,
    )

    assert order == [{"id": "o1"}]
    name, params = mock_supabase_client.rpc.call_args.args
    assert name == "create_order"
    assert params == {
        "p_store_id": "store-1",
        "p_buyer_name": "María",
        "p_buyer_phone": "0412",
        "p_buyer_address": "Pick Up",
        "p_buyer_id": None,
        "p_total_usd": 10.0,
        "p_total_bs": 400.0,
        "p_payment_method": "cash",
        "p_delivery_method": "pickup",
        "p_items": items,
    }
