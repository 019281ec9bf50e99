"""
DepthDesk – Domain Value Objects: Market Sessions
==================================================
Sesiones de mercado que guían al generador sintético.

Una sesión es un tramo de ticks con sesgo de tendencia y volatilidad
comunes. La secuencia se recorre cíclicamente (wraparound).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from backend.domain.exceptions.domain_errors import InvalidArgumentError


class TrendKind(str, Enum):
    UP = "up"
    DOWN = "down"
    SIDEWAYS = "sideways"


@dataclass(frozen=True, slots=True)
class SessionSpec:
    """Configuración read-only de una sesión."""

    trend: TrendKind
    volatility: float
    duration: int        # ticks

    def __post_init__(self) -> None:
        if self.volatility < 0:
            raise InvalidArgumentError(
                "volatility no puede ser negativa", field="volatility", value=self.volatility,
            )
        if self.duration <= 0:
            raise InvalidArgumentError(
                "duration debe ser > 0", field="duration", value=self.duration,
            )


@dataclass(slots=True)
class TrendState:
    """
    Estado mutable del random walk de tendencia.

    Pertenece a UNA ejecución del generador; no se comparte.
    """

    momentum: float = 0.0
    session_index: int = 0
    ticks_in_session: int = 0


DEFAULT_SESSIONS: tuple[SessionSpec, ...] = (
    SessionSpec(TrendKind.UP, 0.008, 25),
    SessionSpec(TrendKind.SIDEWAYS, 0.004, 15),
    SessionSpec(TrendKind.DOWN, 0.010, 20),
    SessionSpec(TrendKind.SIDEWAYS, 0.003, 12),
    SessionSpec(TrendKind.UP, 0.007, 18),
    SessionSpec(TrendKind.DOWN, 0.009, 22),
    SessionSpec(TrendKind.SIDEWAYS, 0.005, 10),
    SessionSpec(TrendKind.UP, 0.006, 15),
)
