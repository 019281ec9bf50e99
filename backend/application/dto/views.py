"""
DepthDesk – Application DTO: Views
===================================
Contratos de datos que consume la capa de render (chart y libro).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from backend.domain.entities.candle import Candle
from backend.domain.entities.order_book import MarkPrice
from backend.domain.value_objects.series import (
    DepthRow,
    IndicatorPoint,
    PressureRatios,
    VolumeBar,
)


@dataclass(frozen=True)
class ChartView:
    """Velas + overlays MA + histograma de volumen de un snapshot."""

    version: int
    source_label: str
    candles: List[Candle] = field(default_factory=list)
    moving_averages: Dict[str, List[IndicatorPoint]] = field(default_factory=dict)
    volume: List[VolumeBar] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "source": self.source_label,
            "candles": [c.to_dict() for c in self.candles],
            "moving_averages": {
                name: [p.to_dict() for p in points]
                for name, points in self.moving_averages.items()
            },
            "volume": [v.to_dict() for v in self.volume],
        }


@dataclass(frozen=True)
class OrderBookView:
    """Filas con profundidad por lado, mark price y ratios de presión."""

    asks: List[DepthRow] = field(default_factory=list)
    bids: List[DepthRow] = field(default_factory=list)
    mark_price: Optional[MarkPrice] = None
    ratios: PressureRatios = field(default_factory=lambda: PressureRatios(0.0, 0.0))

    def to_dict(self) -> dict:
        return {
            "asks": [r.to_dict() for r in self.asks],
            "bids": [r.to_dict() for r in self.bids],
            "mark_price": self.mark_price.to_dict() if self.mark_price else None,
            "ratios": self.ratios.to_dict(),
        }
