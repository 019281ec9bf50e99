"""
DepthDesk – Domain Service: Depth Aggregator
=============================================
Profundidad por nivel, ratios de presión compra/venta y mark price.

FÓRMULAS:
  percentage[i] = volume[i] / max(volume) × 100
  (lista vacía o max(volume) == 0 → todo 0, nunca división por cero)

  mark = (mejor bid + mejor ask) / 2, solo niveles con size > 0
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from backend.domain.entities.order_book import (
    MarkPrice,
    OrderBook,
    OrderBookLevel,
    PriceDirection,
)
from backend.domain.value_objects.series import DepthRow, PressureRatios


def _clamp_pct(value: float) -> float:
    return max(0.0, min(100.0, value))


class DepthAggregator:
    """Servicio stateless de agregación del libro."""

    @staticmethod
    def compute_depth(levels: Sequence[OrderBookLevel]) -> List[DepthRow]:
        if not levels:
            return []
        max_volume = max(level.volume for level in levels)
        if max_volume <= 0:
            return [DepthRow(level=level, percentage=0.0) for level in levels]
        return [
            DepthRow(level=level, percentage=(level.volume / max_volume) * 100)
            for level in levels
        ]

    @staticmethod
    def compute_ratios(buy_pressure: float, sell_pressure: float) -> PressureRatios:
        """
        Clampa cada lado a [0, 100] de forma independiente.

        No se fuerza buy + sell = 100: es responsabilidad del caller.
        """
        return PressureRatios(buy=_clamp_pct(buy_pressure), sell=_clamp_pct(sell_pressure))

    @staticmethod
    def pressure_from_book(book: OrderBook) -> PressureRatios:
        """Reparto porcentual del size total entre bids (buy) y asks (sell)."""
        bid_size = sum(lv.size for lv in book.bids)
        ask_size = sum(lv.size for lv in book.asks)
        total = bid_size + ask_size
        if total <= 0:
            return PressureRatios(buy=0.0, sell=0.0)
        buy = bid_size / total * 100
        return DepthAggregator.compute_ratios(buy, 100 - buy)

    @staticmethod
    def compute_mark_price(
        book: OrderBook,
        previous: Optional[MarkPrice] = None,
    ) -> Optional[MarkPrice]:
        """
        Midpoint entre mejor bid y mejor ask con size > 0.

        direction = UP si el valor no bajó respecto a `previous`.
        """
        best_ask = next((lv for lv in book.asks if lv.size > 0), None)
        best_bid = next((lv for lv in book.bids if lv.size > 0), None)
        if best_ask is None or best_bid is None:
            return None

        value = round((best_ask.price + best_bid.price) / 2, 2)
        if previous is None or value >= previous.value:
            direction = PriceDirection.UP
        else:
            direction = PriceDirection.DOWN
        return MarkPrice(value=value, direction=direction)
