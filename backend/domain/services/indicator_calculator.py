"""
DepthDesk – Domain Service: Indicator Calculator
=================================================
Cálculos de indicadores técnicos puros sobre secuencias de velas.

Series para el chart:
- moving_average()   → línea MA simple (no exponencial)
- synthetic_volume() → histograma de volumen correlacionado con el movimiento
- default_overlays() → MA7 / MA25 / MA99

Sin dependencias externas (no TA-Lib, solo math puro). Funciones totales:
entrada vacía → salida vacía, nunca excepción.

NO DETERMINISMO CONOCIDO:
synthetic_volume usa aleatoriedad; la misma entrada produce la misma forma
distribucional pero no los mismos valores, salvo con RandomSource con semilla.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import InvalidArgumentError
from backend.domain.services.random_source import RandomSource, SystemRandomSource
from backend.domain.value_objects.series import ColorClass, IndicatorPoint, VolumeBar

DEFAULT_MA_PERIODS = (7, 25, 99)
VOLUME_BASE = 500.0
VOLUME_SPREAD = 1500.0
PRICE_CHANGE_WEIGHT = 50.0
RANGE_WEIGHT = 10.0


class IndicatorCalculator:
    """
    Calculadora de indicadores técnicos puros.

    NO mantiene estado (stateless). Solo la fuente aleatoria del volumen
    sintético es inyectable.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        range_weight: float = RANGE_WEIGHT,
    ) -> None:
        self._rng = rng or SystemRandomSource()
        self._range_weight = range_weight

    # ════════════════════════════════════════════════════════════════
    #  Series para el chart
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def moving_average(candles: Sequence[Candle], period: int) -> List[IndicatorPoint]:
        """
        MA simple del close sobre las últimas `period` velas.

        Resultado de longitud max(0, len - period + 1); period > len → [].
        """
        if period <= 0:
            raise InvalidArgumentError("period debe ser > 0", field="period", value=period)
        if period > len(candles):
            return []

        closes = [c.close for c in candles]
        return [
            IndicatorPoint(candles[i].time, math.fsum(closes[i - period + 1:i + 1]) / period)
            for i in range(period - 1, len(candles))
        ]

    def synthetic_volume(self, candles: Sequence[Candle]) -> List[VolumeBar]:
        """
        Volumen sintético: más volumen en velas con mayor cuerpo y rango.

        FÓRMULA:
        volume = floor((500 + U[0, 1500)) × (1 + Δ%×50 + rango%×k2))
        """
        bars: List[VolumeBar] = []
        for c in candles:
            price_change = abs(c.close - c.open) / c.open if c.open else 0.0
            range_pct = (c.high - c.low) / c.open if c.open else 0.0
            multiplier = 1 + price_change * PRICE_CHANGE_WEIGHT + range_pct * self._range_weight
            base_volume = VOLUME_BASE + self._rng.uniform(0.0, VOLUME_SPREAD)
            bars.append(VolumeBar(
                time=c.time,
                value=float(math.floor(base_volume * multiplier)),
                color_class=ColorClass.UP if c.is_bullish else ColorClass.DOWN,
            ))
        return bars

    def default_overlays(
        self,
        candles: Sequence[Candle],
        periods: Sequence[int] = DEFAULT_MA_PERIODS,
    ) -> Dict[str, List[IndicatorPoint]]:
        """MA7 / MA25 / MA99 como los dibuja el chart."""
        return {f"ma{p}": self.moving_average(candles, p) for p in periods}
