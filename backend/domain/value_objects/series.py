"""
DepthDesk – Domain Value Objects: Derived Series
=================================================
Puntos de series derivadas (MA, volumen) y resultados del libro
(profundidad, ratios, estadísticas de rango).

Todos son inmutables: se recalculan, nunca se editan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from backend.domain.entities.order_book import BookSide, OrderBookLevel


class ColorClass(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class IndicatorPoint:
    time: int
    value: float

    def to_dict(self) -> dict:
        return {"time": self.time, "value": self.value}


@dataclass(frozen=True, slots=True)
class VolumeBar:
    time: int
    value: float
    color_class: ColorClass

    def to_dict(self) -> dict:
        return {"time": self.time, "value": self.value, "color_class": self.color_class.value}


@dataclass(frozen=True, slots=True)
class DepthRow:
    """Nivel + ancho de su barra de profundidad en [0, 100]."""

    level: OrderBookLevel
    percentage: float

    def to_dict(self) -> dict:
        data = self.level.to_dict()
        data["percentage"] = self.percentage
        return data


@dataclass(frozen=True, slots=True)
class PressureRatios:
    buy: float
    sell: float

    def to_dict(self) -> dict:
        return {"buy": self.buy, "sell": self.sell}


@dataclass(frozen=True, slots=True)
class SelectionRange:
    """
    Rango contiguo [0, k] anclado en el mejor precio del lado.

    hovered_index=None → nada seleccionado.
    """

    side: BookSide
    hovered_index: Optional[int] = None

    def indices(self, length: int) -> range:
        """Índices seleccionados sobre una lista de `length` niveles."""
        if self.hovered_index is None or self.hovered_index < 0 or length == 0:
            return range(0)
        return range(min(self.hovered_index, length - 1) + 1)


@dataclass(frozen=True, slots=True)
class RangeStats:
    avg_price: float = 0.0
    total_volume_value: float = 0.0
    total_size: float = 0.0

    def to_dict(self) -> dict:
        return {
            "avg_price": self.avg_price,
            "total_volume_value": self.total_volume_value,
            "total_size": self.total_size,
        }
