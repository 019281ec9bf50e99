"""
DepthDesk – Application Service: Crosshair Tracker
===================================================
Contrato observer para el crosshair del chart: los suscriptores reciben la
vela más cercana a la posición del puntero, o None cuando el puntero sale
de la serie.
"""

from __future__ import annotations

import bisect
from typing import Callable, List, Optional, Sequence

from backend.domain.entities.candle import Candle

PointerObserver = Callable[[Optional[Candle]], None]


class CrosshairTracker:
    """Resuelve posiciones de puntero → vela más cercana y notifica."""

    def __init__(self, candles: Sequence[Candle] = ()) -> None:
        self._candles: List[Candle] = []
        self._times: List[int] = []
        self._observers: List[PointerObserver] = []
        self.set_series(candles)

    def set_series(self, candles: Sequence[Candle]) -> None:
        """Reemplaza la serie trazada (p.ej. al llegar un snapshot nuevo)."""
        self._candles = list(candles)
        self._times = [c.time for c in self._candles]

    def subscribe(self, observer: PointerObserver) -> Callable[[], None]:
        """Registra un observer. Devuelve la función para desuscribirlo."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def nearest(self, time: Optional[float]) -> Optional[Candle]:
        if time is None or not self._candles:
            return None
        # Fuera del rango trazado = puntero fuera de la serie
        if time < self._times[0] or time > self._times[-1]:
            return None
        idx = bisect.bisect_left(self._times, time)
        if idx == 0:
            return self._candles[0]
        if idx == len(self._times):
            return self._candles[-1]
        before, after = self._times[idx - 1], self._times[idx]
        return self._candles[idx] if after - time < time - before else self._candles[idx - 1]

    def move(self, time: Optional[float]) -> Optional[Candle]:
        point = self.nearest(time)
        for observer in list(self._observers):
            observer(point)
        return point
