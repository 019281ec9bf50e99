"""
DepthDesk – Use Case: Chart View
=================================
Convierte el MarketSnapshot vigente en los datos del chart:
velas + MA7/25/99 + histograma de volumen sintético.

MEMOIZACIÓN:
El resultado se cachea por versión de snapshot. Cambios de UI que no tocan
los datos (fullscreen, resize...) no recalculan nada, y el volumen
sintético no "baila" entre peticiones del mismo snapshot.
"""

from __future__ import annotations

from typing import Optional, Sequence

from backend.application.dto.market_snapshot import MarketSnapshot
from backend.application.dto.views import ChartView
from backend.domain.services.indicator_calculator import (
    DEFAULT_MA_PERIODS,
    IndicatorCalculator,
)


class ChartViewUseCase:

    def __init__(
        self,
        indicator_calculator: IndicatorCalculator,
        ma_periods: Sequence[int] = DEFAULT_MA_PERIODS,
    ) -> None:
        self._calc = indicator_calculator
        self._ma_periods = tuple(ma_periods)
        self._cached: Optional[ChartView] = None
        self._builds = 0

    def build(self, snapshot: MarketSnapshot) -> ChartView:
        if self._cached is not None and self._cached.version == snapshot.version:
            return self._cached

        candles = list(snapshot.candles)
        view = ChartView(
            version=snapshot.version,
            source_label=snapshot.source_label,
            candles=candles,
            moving_averages=self._calc.default_overlays(candles, self._ma_periods),
            volume=self._calc.synthetic_volume(candles),
        )
        self._cached = view
        self._builds += 1
        return view

    @property
    def builds(self) -> int:
        """Número de recálculos reales (sin contar aciertos de cache)."""
        return self._builds
