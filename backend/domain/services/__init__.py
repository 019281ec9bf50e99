"""Domain services - Pure business logic with no external dependencies."""
from backend.domain.services.random_source import (
    RandomSource,
    SeededRandomSource,
    SystemRandomSource,
    ZeroNoiseRandomSource,
)
from backend.domain.services.session_trend_model import SessionTrendModel
from backend.domain.services.candle_series_generator import CandleSeriesGenerator
from backend.domain.services.indicator_calculator import IndicatorCalculator
from backend.domain.services.depth_aggregator import DepthAggregator
from backend.domain.services.range_selection import RangeSelectionStats

__all__ = [
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
    "ZeroNoiseRandomSource",
    "SessionTrendModel",
    "CandleSeriesGenerator",
    "IndicatorCalculator",
    "DepthAggregator",
    "RangeSelectionStats",
]
