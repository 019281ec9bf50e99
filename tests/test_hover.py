"""Tests del throttle de hover y del contrato observer del crosshair."""

from __future__ import annotations

import asyncio

import pytest

from conftest import make_candle

from backend.application.services.crosshair import CrosshairTracker
from backend.application.services.hover_coalescer import HoverCoalescer


# ─── HoverCoalescer ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_burst_delivers_only_latest_value() -> None:
    delivered: list[int] = []
    coalescer = HoverCoalescer(delivered.append, min_interval=0.01)

    for i in range(50):
        coalescer.push(i)
    assert coalescer.has_pending
    await asyncio.sleep(0.05)

    assert delivered == [49]
    assert coalescer.received == 50
    assert coalescer.delivered == 1


@pytest.mark.asyncio
async def test_same_value_after_flush_is_delivered_again() -> None:
    delivered: list[tuple] = []
    coalescer = HoverCoalescer(delivered.append, min_interval=0.005)

    coalescer.push(("bid", 3))
    await asyncio.sleep(0.03)
    coalescer.push(("bid", 3))
    await asyncio.sleep(0.03)

    assert delivered == [("bid", 3), ("bid", 3)]
    assert coalescer.delivered == 2
    assert not coalescer.has_pending


@pytest.mark.asyncio
async def test_cancel_drops_pending_value() -> None:
    delivered: list[int] = []
    coalescer = HoverCoalescer(delivered.append, min_interval=0.01)

    coalescer.push(1)
    coalescer.cancel()
    coalescer.push(2)
    await asyncio.sleep(0.05)

    assert delivered == []


@pytest.mark.asyncio
async def test_async_callback_is_scheduled() -> None:
    delivered: list[str] = []

    async def on_value(value: str) -> None:
        await asyncio.sleep(0)
        delivered.append(value)

    coalescer = HoverCoalescer(on_value, min_interval=0.005)
    coalescer.push("a")
    coalescer.push("b")
    await asyncio.sleep(0.05)

    assert delivered == ["b"]


# ─── CrosshairTracker ─────────────────────────────────────────────────


def _tracker() -> CrosshairTracker:
    return CrosshairTracker([make_candle(t, 100.0, 101.0) for t in (0, 60, 120)])


@pytest.mark.parametrize("time,expected", [(0, 0), (29, 0), (70, 60), (100, 120), (120, 120), (90, 60)])
def test_nearest_point_inside_series(time: int, expected: int) -> None:
    assert _tracker().nearest(time).time == expected


@pytest.mark.parametrize("time", [None, -1, 121])
def test_pointer_outside_series_yields_none(time) -> None:
    assert _tracker().nearest(time) is None


def test_nearest_on_empty_series_is_none() -> None:
    assert CrosshairTracker().nearest(10) is None


def test_observers_receive_points_until_unsubscribed() -> None:
    tracker = _tracker()
    seen = []
    unsubscribe = tracker.subscribe(seen.append)

    tracker.move(61)
    tracker.move(500)
    unsubscribe()
    tracker.move(0)

    assert [p.time if p else None for p in seen] == [60, None]


def test_set_series_replaces_plotted_points() -> None:
    tracker = _tracker()
    tracker.set_series([make_candle(1000, 1.0, 1.0)])
    assert tracker.nearest(60) is None
    assert tracker.nearest(1000).time == 1000
