"""
DepthDesk – Domain Service: Session Trend Model
================================================
Random walk de momentum guiado por sesiones de mercado.

REGLAS POR TICK:
  up        → momentum += U[0, 0.002), techo  +0.005
  down      → momentum -= U[0, 0.002), suelo  -0.005
  sideways  → momentum *= 0.7 (decae hacia cero)
  después   → momentum += U[-0.0004, 0.0004)

Cuando ticks_in_session alcanza la duración de la sesión, se pasa a la
siguiente (con wraparound) y el contador vuelve a 0.

Reproducible solo en distribución salvo que se inyecte una fuente con semilla.
"""

from __future__ import annotations

from typing import Sequence

from backend.domain.exceptions.domain_errors import InvalidArgumentError
from backend.domain.services.random_source import RandomSource, SystemRandomSource
from backend.domain.value_objects.session import (
    DEFAULT_SESSIONS,
    SessionSpec,
    TrendKind,
    TrendState,
)

MOMENTUM_STEP = 0.002
MOMENTUM_CEILING = 0.005
MOMENTUM_FLOOR = -0.005
SIDEWAYS_DECAY = 0.7
TREND_NOISE = 0.0004


class SessionTrendModel:
    """Generador de deltas de momentum, un paso por tick."""

    def __init__(
        self,
        sessions: Sequence[SessionSpec] = DEFAULT_SESSIONS,
        rng: RandomSource | None = None,
    ) -> None:
        if not sessions:
            raise InvalidArgumentError("Se requiere al menos una sesión", field="sessions")
        self._sessions = tuple(sessions)
        self._rng = rng or SystemRandomSource()

    @property
    def sessions(self) -> tuple[SessionSpec, ...]:
        return self._sessions

    def current_session(self, state: TrendState) -> SessionSpec:
        return self._sessions[state.session_index % len(self._sessions)]

    def advance(self, state: TrendState, session: SessionSpec | None = None) -> tuple[float, SessionSpec]:
        """
        Avanza un tick: actualiza momentum y contadores de sesión en `state`.

        Returns:
            (nuevo momentum, sesión consumida en este tick)
        """
        session = session or self.current_session(state)
        momentum = state.momentum

        if session.trend is TrendKind.UP:
            momentum = min(momentum + self._rng.uniform(0.0, MOMENTUM_STEP), MOMENTUM_CEILING)
        elif session.trend is TrendKind.DOWN:
            momentum = max(momentum - self._rng.uniform(0.0, MOMENTUM_STEP), MOMENTUM_FLOOR)
        else:
            momentum *= SIDEWAYS_DECAY

        momentum += self._rng.uniform(-TREND_NOISE, TREND_NOISE)
        state.momentum = momentum

        state.ticks_in_session += 1
        if state.ticks_in_session >= session.duration:
            state.session_index = (state.session_index + 1) % len(self._sessions)
            state.ticks_in_session = 0

        return momentum, session
