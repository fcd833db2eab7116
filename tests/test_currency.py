"""Tests for exchange rate lookup and money helpers"""
from decimal import Decimal
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from resuelve.services.currency import FALLBACK_EXCHANGE_RATE, CurrencyService
from resuelve.services.money import format_money, multiply, round_money, to_decimal


def _response(payload, status_code=200):
    request = httpx.Request("GET", "https://rates.test/usd")
    return httpx.Response(status_code, json=payload, request=request)


@pytest.fixture
def mock_redis():
    redis = Mock()
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock(return_value=True)
    return redis


@pytest.mark.asyncio
async def test_usd_rate_is_one():
    assert await CurrencyService().get_exchange_rate("USD") == 1.0


@pytest.mark.asyncio
async def test_cached_rate_skips_fetch(mock_redis):
    mock_redis.get = AsyncMock(return_value="41.2")
    service = CurrencyService(redis_client=mock_redis)

    with patch.object(service, "_fetch_exchange_rate", new=AsyncMock()) as mock_fetch:
        rate = await service.get_exchange_rate()

    assert rate == 41.2
    mock_fetch.assert_not_awaited()
    mock_redis.get.assert_awaited_once_with("currency:rate:VES")


@pytest.mark.asyncio
async def test_fetched_rate_is_cached(mock_redis):
    service = CurrencyService(redis_client=mock_redis, api_url="https://rates.test/usd")

    with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response({"promedio": 45.67}))):
        rate = await service.get_exchange_rate()

    assert rate == 45.67
    mock_redis.setex.assert_awaited_once_with("currency:rate:VES", 3600, "45.67")


@pytest.mark.asyncio
async def test_fallback_when_source_unreachable():
    service = CurrencyService(api_url="https://rates.test/usd")

    with patch("httpx.AsyncClient.get", new=AsyncMock(side_effect=httpx.ConnectError("down"))):
        rate = await service.get_exchange_rate()

    assert rate == FALLBACK_EXCHANGE_RATE == 38.5


@pytest.mark.asyncio
async def test_fallback_on_server_error():
    service = CurrencyService(api_url="https://rates.test/usd")

    with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response({}, status_code=503))):
        assert await service.get_exchange_rate() == 38.5


@pytest.mark.asyncio
async def test_fallback_when_field_missing():
    service = CurrencyService(api_url="https://rates.test/usd")

    with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response({"venta": 40}))):
        assert await service.get_exchange_rate() == 38.5


@pytest.mark.asyncio
async def test_cache_failure_is_not_fatal(mock_redis):
    mock_redis.get = AsyncMock(side_effect=ConnectionError("redis down"))
    service = CurrencyService(redis_client=mock_redis)

    with patch.object(service, "_fetch_exchange_rate", new=AsyncMock(return_value=None)):
        assert await service.get_exchange_rate() == 38.5


def test_convert_keeps_full_precision():
    assert CurrencyService.convert(13, 38.5) == Decimal("500.5")
    assert CurrencyService.convert("0.1", 3) == Decimal("0.3")


def test_format_price():
    service = CurrencyService()
    assert service.format_price(1234.5, "USD") == "$1,234.50"
    assert service.format_price(500.5, "VES") == "Bs 500.50"


class TestMoney:
    def test_to_decimal(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("abc") == Decimal("0")

    def test_round_half_up(self):
        assert round_money("2.675") == Decimal("2.68")
        assert round_money(13) == Decimal("13.00")

    def test_multiply(self):
        assert multiply(Decimal("13"), 40.0) == Decimal("520.0")

    def test_format_money(self):
        assert format_money(13) == "$13.00"
        assert format_money(500.5, "VES") == "Bs 500.50"
