"""
DepthDesk – Domain Service: Candle Series Generator
====================================================
Genera series OHLC sintéticas (fallback / demo) sobre un random walk
geométrico guiado por SessionTrendModel.

ALGORITMO POR TICK:
  1. momentum ← SessionTrendModel.advance()
  2. move = momentum + U[-vol/2, vol/2)
  3. open = base ; close = open × (1 + move)
  4. Mechas: body × wick_mult × U, con la mecha del lado de la tendencia
     de la vela ~2.5× la opuesta (ratio 1 : 0.4).
  5. 5% de probabilidad de mecha de rechazo de tamaño base × vol.
  6. high/low se fuerzan a cubrir open/close SIEMPRE.
  7. base ← close

Los timestamps terminan en "ahora" truncado al intervalo.
"""

from __future__ import annotations

import time as _time
from typing import Optional, Sequence

from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import InvalidArgumentError
from backend.domain.services.random_source import RandomSource, SystemRandomSource
from backend.domain.services.session_trend_model import SessionTrendModel
from backend.domain.value_objects.session import DEFAULT_SESSIONS, SessionSpec, TrendState

DEFAULT_BASE_PRICE = 84320.0
WICK_MULT_MIN = 0.3
WICK_MULT_MAX = 1.1
SHORT_WICK_RATIO = 0.4
REJECTION_PROBABILITY = 0.05


class CandleSeriesGenerator:
    """
    Generador de velas sintéticas.

    Cada llamada a generate() usa su propio TrendState; el base_price
    persiste entre llamadas para que series sucesivas sean continuas.
    """

    def __init__(
        self,
        base_price: float = DEFAULT_BASE_PRICE,
        sessions: Sequence[SessionSpec] = DEFAULT_SESSIONS,
        rng: RandomSource | None = None,
        initial_momentum: float = 0.0,
    ) -> None:
        if base_price <= 0:
            raise InvalidArgumentError("base_price debe ser > 0", field="base_price", value=base_price)
        self._rng = rng or SystemRandomSource()
        self._trend_model = SessionTrendModel(sessions, self._rng)
        self._base_price = base_price
        self._initial_momentum = initial_momentum

    @property
    def base_price(self) -> float:
        return self._base_price

    def generate(
        self,
        n: int,
        start_time: Optional[int] = None,
        interval_seconds: int = 3600,
    ) -> list[Candle]:
        """
        Genera `n` velas espaciadas `interval_seconds`.

        Args:
            n: número de velas (> 0)
            start_time: epoch de la primera vela; None → la última cae en
                "ahora" truncado al intervalo
            interval_seconds: separación entre velas (> 0)
        """
        if n <= 0:
            raise InvalidArgumentError("n debe ser > 0", field="n", value=n)
        if interval_seconds <= 0:
            raise InvalidArgumentError(
                "interval_seconds debe ser > 0", field="interval_seconds", value=interval_seconds,
            )

        if start_time is None:
            now = int(_time.time())
            end = now - (now % interval_seconds)
            start_time = end - (n - 1) * interval_seconds

        state = TrendState(momentum=self._initial_momentum)
        candles: list[Candle] = []
        for i in range(n):
            candles.append(self._next_candle(state, start_time + i * interval_seconds))
        return candles

    def _next_candle(self, state: TrendState, ts: int) -> Candle:
        momentum, session = self._trend_model.advance(state)
        volatility = session.volatility
        rng = self._rng

        move_percent = momentum + rng.uniform(-volatility / 2, volatility / 2)
        open_ = self._base_price
        close = open_ * (1 + move_percent)

        body = abs(close - open_)
        wick_mult = rng.uniform(WICK_MULT_MIN, WICK_MULT_MAX)
        top, bottom = max(open_, close), min(open_, close)

        if close >= open_:
            high = top + body * wick_mult * rng.uniform(0.0, 1.0)
            low = bottom - body * wick_mult * rng.uniform(0.0, 1.0) * SHORT_WICK_RATIO
        else:
            high = top + body * wick_mult * rng.uniform(0.0, 1.0) * SHORT_WICK_RATIO
            low = bottom - body * wick_mult * rng.uniform(0.0, 1.0)

        # Rechazo en soporte/resistencia
        if rng.chance(REJECTION_PROBABILITY):
            if rng.chance(0.5):
                high = top + open_ * volatility
            else:
                low = bottom - open_ * volatility

        self._base_price = close

        o, c = round(open_, 2), round(close, 2)
        return Candle(
            time=ts,
            open=o,
            high=max(round(high, 2), o, c),
            low=min(round(low, 2), o, c),
            close=c,
        )
