"""Tests de las vistas derivadas: chart memoizado y libro L2."""

from __future__ import annotations

import asyncio

import pytest

from conftest import make_book, make_candle

from backend.application.dto.market_snapshot import MarketSnapshot
from backend.application.ports.event_publisher import ORDERBOOK_TOPIC
from backend.application.ports.order_book_feed import IOrderBookFeed
from backend.application.use_cases.chart_view_usecase import ChartViewUseCase
from backend.application.use_cases.order_book_usecase import OrderBookViewUseCase
from backend.domain.entities.order_book import BookSide, OrderBook, PriceDirection
from backend.domain.services.indicator_calculator import IndicatorCalculator
from backend.domain.value_objects.series import PressureRatios, RangeStats
from backend.infrastructure.external.event_bus_adapter import EventBusAdapter


def _snapshot(version: int, n: int = 30) -> MarketSnapshot:
    candles = tuple(make_candle(i * 60, 100.0 + i, 100.5 + i) for i in range(n))
    return MarketSnapshot(version=version, candles=candles, source_label="fake")


class _FixedFeed(IOrderBookFeed):
    def __init__(self, book: OrderBook, pressure: PressureRatios) -> None:
        self._book = book
        self._pressure = pressure
        self.ticks = 0

    def next_book(self) -> OrderBook:
        self.ticks += 1
        return self._book

    def next_pressure(self) -> PressureRatios:
        return self._pressure


# ─── Chart ────────────────────────────────────────────────────────────


def test_chart_view_is_memoized_per_snapshot_version() -> None:
    use_case = ChartViewUseCase(IndicatorCalculator())
    snapshot = _snapshot(version=1)

    first = use_case.build(snapshot)
    again = use_case.build(snapshot)

    assert again is first
    assert use_case.builds == 1

    use_case.build(_snapshot(version=2))
    assert use_case.builds == 2


def test_chart_view_contents() -> None:
    view = ChartViewUseCase(IndicatorCalculator()).build(_snapshot(version=3, n=30))

    assert view.version == 3
    assert len(view.candles) == 30
    assert len(view.volume) == 30
    assert {k: len(v) for k, v in view.moving_averages.items()} == {"ma7": 24, "ma25": 6, "ma99": 0}
    assert view.to_dict()["source"] == "fake"


def test_chart_view_of_empty_snapshot_is_empty() -> None:
    view = ChartViewUseCase(IndicatorCalculator()).build(MarketSnapshot())
    assert view.candles == [] and view.volume == []
    assert all(points == [] for points in view.moving_averages.values())


# ─── Libro ────────────────────────────────────────────────────────────


def test_order_book_view_before_first_update_is_empty() -> None:
    use_case = OrderBookViewUseCase(_FixedFeed(make_book(), PressureRatios(60, 40)))
    view = use_case.view()
    assert view.asks == [] and view.bids == []
    assert view.mark_price is None


def test_apply_computes_depth_mark_and_clamped_ratios() -> None:
    use_case = OrderBookViewUseCase(_FixedFeed(make_book(), PressureRatios(150, -10)))

    view = use_case.update_from_feed()

    assert [r.percentage for r in view.asks] == [20.0, 100.0]
    assert [r.percentage for r in view.bids] == [75.0, 100.0]
    assert view.mark_price.value == 100.0
    assert (view.ratios.buy, view.ratios.sell) == (100.0, 0.0)
    assert use_case.view() is view


def test_apply_without_pressure_derives_it_from_book() -> None:
    use_case = OrderBookViewUseCase(_FixedFeed(make_book(), PressureRatios(0, 0)))
    view = use_case.apply(make_book())
    assert view.ratios.buy + view.ratios.sell == pytest.approx(100.0)


def test_mark_direction_tracks_previous_book() -> None:
    use_case = OrderBookViewUseCase(_FixedFeed(make_book(), PressureRatios(50, 50)))
    use_case.update_from_feed()
    view = use_case.update_from_feed()
    assert view.mark_price.direction is PriceDirection.UP


def test_selection_stats_use_current_book() -> None:
    use_case = OrderBookViewUseCase(_FixedFeed(make_book(), PressureRatios(50, 50)))
    assert use_case.selection_stats(BookSide.ASK, 0) == RangeStats()

    use_case.update_from_feed()

    stats = use_case.selection_stats(BookSide.BID, 0)
    assert stats.avg_price == 99.0
    assert stats.total_size == 3.0


@pytest.mark.asyncio
async def test_ticker_publishes_order_book_events() -> None:
    bus = EventBusAdapter()
    queue = await bus.subscribe(ORDERBOOK_TOPIC, "test")
    feed = _FixedFeed(make_book(), PressureRatios(60, 40))
    use_case = OrderBookViewUseCase(feed, event_publisher=bus, tick_seconds=3600)

    await use_case.start()
    event = await asyncio.wait_for(queue.get(), timeout=1.0)
    await use_case.stop()

    assert event["mark_price"] == {"value": 100.0, "direction": "up"}
    assert event["ratios"] == {"buy": 60.0, "sell": 40.0}
    assert len(event["asks"]) == 2
    assert use_case.stats["running"] is False
    assert feed.ticks == 1
