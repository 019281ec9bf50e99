"""Domain entities."""
from backend.domain.entities.candle import Candle
from backend.domain.entities.order_book import (
    BookSide,
    MarkPrice,
    OrderBook,
    OrderBookLevel,
    PriceDirection,
)
from backend.domain.entities.order_ticket import OrderSide, OrderTicket, OrderType

__all__ = [
    "Candle",
    "BookSide",
    "MarkPrice",
    "OrderBook",
    "OrderBookLevel",
    "PriceDirection",
    "OrderSide",
    "OrderTicket",
    "OrderType",
]
