"""
DepthDesk – Application DTO: Market Snapshot
=============================================
Snapshot único y vigente de velas + mark price.

El poller es su único dueño: en cada poll construye uno NUEVO (version + 1)
y reemplaza la referencia; los consumidores solo leen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from backend.application.dto.fetch_result import FetchError
from backend.domain.entities.candle import Candle


@dataclass(frozen=True)
class MarketSnapshot:
    version: int = 0
    candles: tuple[Candle, ...] = field(default_factory=tuple)
    source_label: str = ""
    mark_price: Optional[float] = None
    mark_price_stale: bool = False
    fetched_at: float = 0.0
    error: Optional[FetchError] = None

    @property
    def is_empty(self) -> bool:
        return not self.candles

    def to_dict(self, include_candles: bool = True) -> dict:
        data = {
            "version": self.version,
            "source": self.source_label,
            "mark_price": self.mark_price,
            "mark_price_stale": self.mark_price_stale,
            "fetched_at": self.fetched_at,
            "error": self.error.to_dict() if self.error else None,
            "count": len(self.candles),
        }
        if include_candles:
            data["candles"] = [c.to_dict() for c in self.candles]
        return data
