"""Tests del poller: merge atómico, mark stale, fallback, deduplicación y teardown."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from conftest import make_candle

from backend.application.dto.fetch_result import CandleBatch, FetchErrorKind, FetchResult
from backend.application.ports.event_publisher import MARKET_SNAPSHOT_TOPIC
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.application.use_cases.poll_market_data_usecase import MarketDataPoller
from backend.infrastructure.external.event_bus_adapter import EventBusAdapter

_FAIL = FetchResult.fail(FetchErrorKind.UNAVAILABLE, "HTTP 503", status=503)


def _batch(*closes: float, label: str = "fake") -> FetchResult:
    candles = tuple(make_candle(i * 60, close, close) for i, close in enumerate(closes))
    return FetchResult.ok(CandleBatch(candles=candles, source_label=label))


class _ScriptedProvider(IMarketDataProvider):
    """Devuelve los resultados en orden; repite el último cuando se agotan."""

    def __init__(self, candles: list[FetchResult], marks: list[FetchResult], label: str = "fake") -> None:
        self._candles = list(candles)
        self._marks = list(marks)
        self._label = label
        self.gate: Optional[asyncio.Event] = None
        self.fetch_calls = 0

    @property
    def source_label(self) -> str:
        return self._label

    @staticmethod
    def _next(results: list[FetchResult]) -> FetchResult:
        return results.pop(0) if len(results) > 1 else results[0]

    async def fetch(self) -> FetchResult[CandleBatch]:
        self.fetch_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        return self._next(self._candles)

    async def fetch_mark_price(self) -> FetchResult[float]:
        return self._next(self._marks)


def _poller(provider: IMarketDataProvider, **kwargs: Any) -> MarketDataPoller:
    return MarketDataPoller(provider, clock=lambda: 1234.0, **kwargs)


@pytest.mark.asyncio
async def test_successful_poll_replaces_snapshot_atomically() -> None:
    provider = _ScriptedProvider([_batch(100.0, 101.0)], [FetchResult.ok(101.5)])
    poller = _poller(provider)

    snapshot = await poller.poll_once()

    assert snapshot is poller.snapshot
    assert snapshot.version == 1
    assert [c.close for c in snapshot.candles] == [100.0, 101.0]
    assert snapshot.mark_price == 101.5
    assert snapshot.mark_price_stale is False
    assert snapshot.source_label == "fake"
    assert snapshot.fetched_at == 1234.0
    assert snapshot.error is None


@pytest.mark.asyncio
async def test_mark_failure_keeps_previous_mark_as_stale() -> None:
    provider = _ScriptedProvider(
        [_batch(100.0), _batch(100.0, 102.0)],
        [FetchResult.ok(100.2), _FAIL],
    )
    poller = _poller(provider)

    await poller.poll_once()
    snapshot = await poller.poll_once()

    assert [c.close for c in snapshot.candles] == [100.0, 102.0]
    assert snapshot.mark_price == 100.2
    assert snapshot.mark_price_stale is True


@pytest.mark.asyncio
async def test_mark_failure_without_previous_uses_last_close() -> None:
    poller = _poller(_ScriptedProvider([_batch(100.0, 103.0)], [_FAIL]))

    snapshot = await poller.poll_once()

    assert snapshot.mark_price == 103.0
    assert snapshot.mark_price_stale is True


@pytest.mark.asyncio
async def test_candle_failure_keeps_previous_candles_and_records_error() -> None:
    provider = _ScriptedProvider(
        [_batch(100.0, 101.0), _FAIL],
        [FetchResult.ok(101.0), FetchResult.ok(99.0)],
    )
    poller = _poller(provider)

    first = await poller.poll_once()
    second = await poller.poll_once()

    assert second.version == 2
    assert second.candles == first.candles
    assert second.error.status == 503
    assert second.mark_price == 99.0
    assert second.mark_price_stale is False
    assert poller.stats["failures"] == 1


@pytest.mark.asyncio
async def test_first_failure_uses_synthetic_fallback() -> None:
    fallback = _ScriptedProvider([_batch(84320.0, label="synthetic")], [FetchResult.ok(84320.0)], label="synthetic")
    poller = _poller(_ScriptedProvider([_FAIL], [_FAIL]), fallback=fallback)

    snapshot = await poller.poll_once()

    assert snapshot.source_label == "synthetic"
    assert len(snapshot.candles) == 1
    assert snapshot.error.kind is FetchErrorKind.UNAVAILABLE
    assert snapshot.mark_price == 84320.0
    assert snapshot.mark_price_stale is True


@pytest.mark.asyncio
async def test_fallback_not_used_once_data_exists() -> None:
    fallback = _ScriptedProvider([_batch(1.0, label="synthetic")], [FetchResult.ok(1.0)], label="synthetic")
    provider = _ScriptedProvider([_batch(100.0), _FAIL], [FetchResult.ok(100.0)])
    poller = _poller(provider, fallback=fallback)

    await poller.poll_once()
    snapshot = await poller.poll_once()

    assert snapshot.source_label == "fake"
    assert fallback.fetch_calls == 0


@pytest.mark.asyncio
async def test_poll_while_in_flight_is_skipped() -> None:
    provider = _ScriptedProvider([_batch(100.0)], [FetchResult.ok(100.0)])
    provider.gate = asyncio.Event()
    poller = _poller(provider)

    pending = asyncio.create_task(poller.poll_once())
    await asyncio.sleep(0)
    assert await poller.refresh() is None

    provider.gate.set()
    snapshot = await pending

    assert snapshot.version == 1
    assert provider.fetch_calls == 1
    assert poller.stats["skipped"] == 1


@pytest.mark.asyncio
async def test_result_arriving_after_stop_is_discarded() -> None:
    provider = _ScriptedProvider([_batch(100.0)], [FetchResult.ok(100.0)])
    provider.gate = asyncio.Event()
    poller = _poller(provider)

    pending = asyncio.create_task(poller.poll_once())
    await asyncio.sleep(0)
    await poller.stop()
    provider.gate.set()

    assert await pending is None
    assert poller.snapshot.version == 0
    assert poller.stats["discarded"] == 1


@pytest.mark.asyncio
async def test_snapshot_is_published_to_event_bus() -> None:
    bus = EventBusAdapter()
    queue = await bus.subscribe(MARKET_SNAPSHOT_TOPIC, "test")
    poller = _poller(_ScriptedProvider([_batch(100.0)], [FetchResult.ok(100.0)]), event_publisher=bus)

    await poller.poll_once()

    event = queue.get_nowait()
    assert event["version"] == 1
    assert event["candles"][0]["close"] == 100.0


@pytest.mark.asyncio
async def test_start_polls_immediately_and_stop_cancels() -> None:
    poller = _poller(_ScriptedProvider([_batch(100.0)], [FetchResult.ok(100.0)]), poll_interval=3600)

    await poller.start()
    for _ in range(100):
        if poller.snapshot.version >= 1:
            break
        await asyncio.sleep(0.001)

    assert poller.is_running
    assert poller.snapshot.version == 1

    await poller.stop()
    assert not poller.is_running
