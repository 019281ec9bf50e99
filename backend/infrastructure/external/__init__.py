"""External systems - feeds, servicio de órdenes y messaging."""

from backend.infrastructure.external.event_bus_adapter import EventBusAdapter
from backend.infrastructure.external.binance_adapter import (
    BinanceKlineAdapter,
    normalize_kline,
    normalize_klines,
)
from backend.infrastructure.external.synthetic_adapter import SyntheticMarketAdapter
from backend.infrastructure.external.synthetic_order_book import SyntheticOrderBookFeed
from backend.infrastructure.external.order_client import AuthSession, OrderClient

__all__ = [
    "EventBusAdapter",
    "BinanceKlineAdapter",
    "normalize_kline",
    "normalize_klines",
    "SyntheticMarketAdapter",
    "SyntheticOrderBookFeed",
    "AuthSession",
    "OrderClient",
]
