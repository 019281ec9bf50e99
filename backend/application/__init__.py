"""
DepthDesk – Application Layer
==============================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: Polling del feed, vista del chart, vista del libro
- ports/: Interfaces hacia infraestructura
- dto/: Data Transfer Objects (FetchResult, MarketSnapshot, vistas)
- services/: Coalescer de hover y tracker de crosshair

REGLA DE DEPENDENCIA:
Esta capa puede importar de:
- domain/ (entidades, servicios)
- ports/ propios (interfaces hacia infra)

NO puede importar de:
- infrastructure/ (implementaciones concretas)
- presentation/ (API)
"""

from backend.application.use_cases.poll_market_data_usecase import MarketDataPoller
from backend.application.use_cases.chart_view_usecase import ChartViewUseCase
from backend.application.use_cases.order_book_usecase import OrderBookViewUseCase

__all__ = [
    "MarketDataPoller",
    "ChartViewUseCase",
    "OrderBookViewUseCase",
]
