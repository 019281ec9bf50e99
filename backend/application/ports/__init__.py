"""Application ports - Interfaces to infrastructure."""
from backend.application.ports.event_publisher import (
    IEventPublisher,
    MARKET_SNAPSHOT_TOPIC,
    ORDERBOOK_TOPIC,
)
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.application.ports.order_book_feed import IOrderBookFeed

__all__ = [
    "IEventPublisher",
    "IMarketDataProvider",
    "IOrderBookFeed",
    "MARKET_SNAPSHOT_TOPIC",
    "ORDERBOOK_TOPIC",
]
