"""Tests del generador sintético y del modelo de tendencia por sesiones."""

from __future__ import annotations

import pytest

from backend.domain.exceptions.domain_errors import InvalidArgumentError
from backend.domain.services.candle_series_generator import CandleSeriesGenerator
from backend.domain.services.random_source import SeededRandomSource, ZeroNoiseRandomSource
from backend.domain.services.session_trend_model import (
    MOMENTUM_CEILING,
    MOMENTUM_FLOOR,
    TREND_NOISE,
    SessionTrendModel,
)
from backend.domain.value_objects.session import SessionSpec, TrendKind, TrendState


def test_generated_candles_always_cover_open_and_close() -> None:
    generator = CandleSeriesGenerator()
    candles = generator.generate(10_000, start_time=0, interval_seconds=60)

    assert len(candles) == 10_000
    for c in candles:
        assert c.high >= max(c.open, c.close)
        assert c.low <= min(c.open, c.close)


def test_seeded_generation_is_reproducible() -> None:
    a = CandleSeriesGenerator(rng=SeededRandomSource(7)).generate(50, start_time=0)
    b = CandleSeriesGenerator(rng=SeededRandomSource(7)).generate(50, start_time=0)
    assert a == b


@pytest.mark.parametrize("n", [0, -3])
def test_generate_rejects_non_positive_count(n: int) -> None:
    with pytest.raises(InvalidArgumentError):
        CandleSeriesGenerator().generate(n)


def test_generate_rejects_non_positive_interval() -> None:
    with pytest.raises(InvalidArgumentError):
        CandleSeriesGenerator().generate(5, interval_seconds=0)


def test_zero_noise_flat_session_produces_flat_candle() -> None:
    generator = CandleSeriesGenerator(
        base_price=84320.0,
        sessions=(SessionSpec(TrendKind.SIDEWAYS, 0.0, 1),),
        rng=ZeroNoiseRandomSource(),
    )
    (candle,) = generator.generate(1, start_time=1_700_000_000)

    assert candle.open == candle.close == candle.high == candle.low == 84320.00
    assert candle.time == 1_700_000_000


def test_timestamps_are_evenly_spaced_from_start_time() -> None:
    candles = CandleSeriesGenerator().generate(5, start_time=1000, interval_seconds=60)
    assert [c.time for c in candles] == [1000, 1060, 1120, 1180, 1240]


def test_timestamps_end_on_interval_boundary_by_default() -> None:
    candles = CandleSeriesGenerator().generate(3, interval_seconds=3600)
    times = [c.time for c in candles]
    assert times[-1] % 3600 == 0
    assert times[1] - times[0] == times[2] - times[1] == 3600


def test_successive_series_continue_from_last_close() -> None:
    generator = CandleSeriesGenerator(rng=SeededRandomSource(3))
    first = generator.generate(10, start_time=0)
    second = generator.generate(1, start_time=36_000)
    assert second[0].open == first[-1].close


def test_base_price_must_be_positive() -> None:
    with pytest.raises(InvalidArgumentError):
        CandleSeriesGenerator(base_price=0)


# ─── SessionTrendModel ────────────────────────────────────────────────


def test_up_session_momentum_stays_under_ceiling_plus_noise() -> None:
    model = SessionTrendModel((SessionSpec(TrendKind.UP, 0.01, 5_000),), SeededRandomSource(1))
    state = TrendState()
    for _ in range(2_000):
        momentum, _ = model.advance(state)
        assert momentum <= MOMENTUM_CEILING + TREND_NOISE


def test_down_session_momentum_stays_over_floor_minus_noise() -> None:
    model = SessionTrendModel((SessionSpec(TrendKind.DOWN, 0.01, 5_000),), SeededRandomSource(2))
    state = TrendState()
    for _ in range(2_000):
        momentum, _ = model.advance(state)
        assert momentum >= MOMENTUM_FLOOR - TREND_NOISE


def test_sideways_session_decays_momentum() -> None:
    model = SessionTrendModel((SessionSpec(TrendKind.SIDEWAYS, 0.0, 10),), ZeroNoiseRandomSource())
    state = TrendState(momentum=0.004)
    momentum, _ = model.advance(state)
    assert momentum == pytest.approx(0.0028)


def test_sessions_wrap_around_after_duration() -> None:
    sessions = (
        SessionSpec(TrendKind.UP, 0.01, 2),
        SessionSpec(TrendKind.DOWN, 0.01, 1),
    )
    model = SessionTrendModel(sessions, ZeroNoiseRandomSource())
    state = TrendState()

    consumed = [model.advance(state)[1].trend for _ in range(4)]

    assert consumed == [TrendKind.UP, TrendKind.UP, TrendKind.DOWN, TrendKind.UP]
    assert state.session_index == 0
    assert state.ticks_in_session == 1


def test_model_requires_at_least_one_session() -> None:
    with pytest.raises(InvalidArgumentError):
        SessionTrendModel(())


@pytest.mark.parametrize("volatility,duration", [(-0.01, 5), (0.01, 0)])
def test_session_spec_validation(volatility: float, duration: int) -> None:
    with pytest.raises(InvalidArgumentError):
        SessionSpec(TrendKind.UP, volatility, duration)
