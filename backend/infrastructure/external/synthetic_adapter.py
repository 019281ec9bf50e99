"""
Synthetic Market Adapter.

Implementación de IMarketDataProvider sobre CandleSeriesGenerator.
Se usa como fuente demo o como fallback cuando el feed externo no responde.
Nunca falla.
"""

from __future__ import annotations

from typing import Optional

from backend.application.dto.fetch_result import CandleBatch, FetchResult
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.domain.entities.candle import Candle
from backend.domain.services.candle_series_generator import CandleSeriesGenerator
from backend.shared.logging.logger import get_logger

logger = get_logger("synthetic_adapter")

SYNTHETIC_LABEL = "synthetic"


class SyntheticMarketAdapter(IMarketDataProvider):
    """
    Genera la serie UNA vez y la reutiliza en polls posteriores, de modo
    que el chart demo no se regenera en cada ciclo.
    """

    def __init__(
        self,
        generator: CandleSeriesGenerator,
        count: int = 200,
        interval_seconds: int = 3600,
    ) -> None:
        self._generator = generator
        self._count = count
        self._interval = interval_seconds
        self._candles: Optional[tuple[Candle, ...]] = None

    @property
    def source_label(self) -> str:
        return SYNTHETIC_LABEL

    def _series(self) -> tuple[Candle, ...]:
        if self._candles is None:
            self._candles = tuple(self._generator.generate(self._count, interval_seconds=self._interval))
            logger.info("Serie sintética generada: %d velas", len(self._candles))
        return self._candles

    async def fetch(self) -> FetchResult[CandleBatch]:
        return FetchResult.ok(CandleBatch(candles=self._series(), source_label=SYNTHETIC_LABEL))

    async def fetch_mark_price(self) -> FetchResult[float]:
        return FetchResult.ok(self._series()[-1].close)
