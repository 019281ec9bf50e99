"""
DepthDesk – Domain Entity: Candle
==================================
Vela OHLC inmutable, generada sintéticamente o normalizada desde el feed.

Decisiones de diseño:
- frozen=True → una vez emitida nadie la altera; una nueva serie reemplaza
  a la anterior completa.
- Se usa dataclass por rendimiento (más ligera que Pydantic para hot-path).
- El invariante high >= max(open, close) >= min(open, close) >= low se
  valida al construir.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend.domain.exceptions.domain_errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLC con timestamp de apertura en segundos UNIX."""

    time: int        # epoch de apertura (segundos)
    open: float
    high: float
    low: float
    close: float

    def __post_init__(self) -> None:
        if self.high < max(self.open, self.close) or self.low > min(self.open, self.close):
            raise InvalidArgumentError(
                f"Vela incoherente en t={self.time}: "
                f"O={self.open} H={self.high} L={self.low} C={self.close}",
                field="high/low",
            )

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open

    def to_dict(self) -> dict:
        """Serialización para WebSocket / frontend."""
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
