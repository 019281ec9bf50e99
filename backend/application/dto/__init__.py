"""Application DTOs - Data Transfer Objects for use cases."""
from backend.application.dto.fetch_result import (
    CandleBatch,
    FetchError,
    FetchErrorKind,
    FetchResult,
)
from backend.application.dto.market_snapshot import MarketSnapshot
from backend.application.dto.views import ChartView, OrderBookView

__all__ = [
    "CandleBatch",
    "FetchError",
    "FetchErrorKind",
    "FetchResult",
    "MarketSnapshot",
    "ChartView",
    "OrderBookView",
]
