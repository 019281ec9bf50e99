"""
DepthDesk – Domain Service: Random Sources
===========================================
Fuente de aleatoriedad inyectable para el generador y el volumen sintético.

IMPLEMENTACIONES:
- SystemRandomSource   → producción (random del sistema, sin semilla)
- SeededRandomSource   → tests y replay reproducible
- ZeroNoiseRandomSource → determinista: cada draw devuelve el punto del
  intervalo más cercano a cero (sin movimiento, sin mechas)
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional


class RandomSource(ABC):
    """Estrategia de números aleatorios."""

    @abstractmethod
    def uniform(self, low: float, high: float) -> float:
        """Draw en [low, high)."""

    def chance(self, probability: float) -> bool:
        """True con probabilidad `probability`."""
        return self.uniform(0.0, 1.0) > 1.0 - probability


class SystemRandomSource(RandomSource):
    def __init__(self) -> None:
        self._rng = random.Random()

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self._rng.random()


class SeededRandomSource(RandomSource):
    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self._rng.random()


class ZeroNoiseRandomSource(RandomSource):
    def uniform(self, low: float, high: float) -> float:
        if low <= 0.0 <= high:
            return 0.0
        return low if abs(low) < abs(high) else high
