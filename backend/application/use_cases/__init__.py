"""Application use cases - Business logic orchestration."""

from backend.application.use_cases.poll_market_data_usecase import MarketDataPoller
from backend.application.use_cases.chart_view_usecase import ChartViewUseCase
from backend.application.use_cases.order_book_usecase import OrderBookViewUseCase

__all__ = [
    "MarketDataPoller",
    "ChartViewUseCase",
    "OrderBookViewUseCase",
]
