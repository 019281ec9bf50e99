"""Tests del adapter de klines: normalización y traducción de fallos a FetchResult."""

from __future__ import annotations

import asyncio

import aiohttp
import pytest

from conftest import FakeResponse, FakeSession

from backend.application.dto.fetch_result import FetchErrorKind
from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import FetchUnavailableError, InvalidArgumentError
from backend.infrastructure.external.binance_adapter import (
    BinanceKlineAdapter,
    normalize_kline,
    normalize_klines,
)
from backend.shared.config.settings import Settings

_KLINES = [
    [1700000000000, "100.5", "101.2", "99.8", "100.9", "12.3", 1700003599999],
    [1700003600000, "100.9", "102.0", "100.1", "101.7", "8.1", 1700007199999],
]


def _settings() -> Settings:
    return Settings(symbol="btcusdt", kline_interval="1h", kline_limit=5000, feed_base_url="http://feed.test/")


def test_normalize_kline_record() -> None:
    candle = normalize_kline([1700000000000, "100.5", "101.2", "99.8", "100.9", "12.3"])
    assert candle == Candle(time=1700000000, open=100.5, high=101.2, low=99.8, close=100.9)


@pytest.mark.parametrize("record", [[1700000000000, "1", "2"], [1700000000000, "x", "2", "1", "1"]])
def test_normalize_kline_rejects_bad_records(record: list) -> None:
    with pytest.raises(InvalidArgumentError):
        normalize_kline(record)


def test_normalize_klines_sorts_and_dedupes_by_time() -> None:
    records = [_KLINES[1], _KLINES[0], [1700003600000, "100.9", "103.0", "100.0", "102.5", "1"]]
    candles = normalize_klines(records)
    assert [c.time for c in candles] == [1700000000, 1700003600]
    assert candles[1].close == 102.5


@pytest.mark.asyncio
async def test_fetch_returns_candle_batch_and_sends_query() -> None:
    session = FakeSession({"/api/v3/klines": FakeResponse(200, _KLINES)})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch()

    assert result.is_ok
    assert result.value.source_label == "binance:BTCUSDT"
    assert [c.close for c in result.value.candles] == [100.9, 101.7]
    call = session.calls[0]
    assert call["url"] == "http://feed.test/api/v3/klines"
    assert call["params"] == {"symbol": "BTCUSDT", "interval": "1h", "limit": 1000}


@pytest.mark.asyncio
async def test_fetch_mark_price_parses_ticker() -> None:
    session = FakeSession({"/api/v3/ticker/price": FakeResponse(200, {"symbol": "BTCUSDT", "price": "84321.50"})})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch_mark_price()

    assert result.unwrap() == 84321.5


@pytest.mark.asyncio
async def test_non_2xx_is_unavailable_with_status() -> None:
    session = FakeSession({"/api/v3/klines": FakeResponse(503, {"msg": "down"})})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch()

    assert not result.is_ok
    assert result.error.kind is FetchErrorKind.UNAVAILABLE
    assert result.error.status == 503
    with pytest.raises(FetchUnavailableError):
        result.unwrap()


@pytest.mark.asyncio
async def test_network_error_is_unavailable() -> None:
    session = FakeSession({"/api/v3/klines": aiohttp.ClientConnectionError("refused")})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch()

    assert result.error.kind is FetchErrorKind.UNAVAILABLE
    assert result.error.status is None
    assert adapter.stats["errors"] == 1


@pytest.mark.asyncio
async def test_timeout_is_unavailable() -> None:
    session = FakeSession({"/api/v3/ticker/price": asyncio.TimeoutError()})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch_mark_price()

    assert result.error.kind is FetchErrorKind.UNAVAILABLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, {"not": "a list"}),
        FakeResponse(200, json_error=ValueError("bad json")),
        FakeResponse(200, [[1700000000000, "100", "90", "95", "99"]]),  # high < open
    ],
)
async def test_bad_payload_is_invalid_payload(response: FakeResponse) -> None:
    adapter = BinanceKlineAdapter(_settings(), session=FakeSession({"/api/v3/klines": response}))

    result = await adapter.fetch()

    assert result.error.kind is FetchErrorKind.INVALID_PAYLOAD


@pytest.mark.asyncio
async def test_ticker_without_price_is_invalid_payload() -> None:
    session = FakeSession({"/api/v3/ticker/price": FakeResponse(200, {"symbol": "BTCUSDT"})})
    adapter = BinanceKlineAdapter(_settings(), session=session)

    result = await adapter.fetch_mark_price()

    assert result.error.kind is FetchErrorKind.INVALID_PAYLOAD


@pytest.mark.asyncio
async def test_close_leaves_injected_session_open() -> None:
    session = FakeSession({})
    adapter = BinanceKlineAdapter(_settings(), session=session)
    await adapter.close()
    assert session.closed is False
