"""
DepthDesk – Domain Layer
=========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Entidades (Candle, OrderBookLevel, OrderBook)
- value_objects/: Objetos inmutables (SessionSpec, IndicatorPoint, RangeStats...)
- services/: Servicios de dominio puros (generador, indicadores, profundidad)
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (FastAPI, aiohttp, etc.)
"""

from backend.domain.entities.candle import Candle
from backend.domain.entities.order_book import (
    BookSide,
    MarkPrice,
    OrderBook,
    OrderBookLevel,
    PriceDirection,
)
from backend.domain.value_objects.session import SessionSpec, TrendKind, TrendState

__all__ = [
    "Candle",
    "BookSide",
    "MarkPrice",
    "OrderBook",
    "OrderBookLevel",
    "PriceDirection",
    "SessionSpec",
    "TrendKind",
    "TrendState",
]
