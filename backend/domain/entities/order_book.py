"""
DepthDesk – Domain Entity: Order Book
======================================
Niveles L2 del libro de órdenes y snapshot inmutable de ambos lados.

ORDEN DE LOS LADOS:
- asks: precio ascendente → índice 0 = mejor ask (más cercano al mark).
- bids: precio descendente → índice 0 = mejor bid.

El snapshot se reemplaza completo en cada actualización; los lectores nunca
ven un libro a medio modificar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from backend.domain.exceptions.domain_errors import InvalidArgumentError


class BookSide(str, Enum):
    ASK = "ask"
    BID = "bid"


class PriceDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class OrderBookLevel:
    """Un nivel de precio del libro."""

    id: str
    price: float
    size: float
    volume: float                 # métrica de profundidad acumulada
    total: float = field(default=0.0)

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise InvalidArgumentError("price debe ser > 0", field="price", value=self.price)
        if self.size < 0:
            raise InvalidArgumentError("size debe ser >= 0", field="size", value=self.size)
        if self.volume < 0:
            raise InvalidArgumentError("volume debe ser >= 0", field="volume", value=self.volume)
        # total siempre es price * size; se ignora lo que venga del caller
        object.__setattr__(self, "total", self.price * self.size)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "price": self.price,
            "size": self.size,
            "total": self.total,
            "volume": self.volume,
        }


@dataclass(frozen=True, slots=True)
class MarkPrice:
    """Precio de referencia (midpoint bid/ask) con dirección respecto al anterior."""

    value: float
    direction: PriceDirection

    def to_dict(self) -> dict:
        return {"value": self.value, "direction": self.direction.value}


def _sorted_side(levels: Iterable[OrderBookLevel], side: BookSide) -> tuple[OrderBookLevel, ...]:
    return tuple(sorted(levels, key=lambda lv: lv.price, reverse=(side is BookSide.BID)))


@dataclass(frozen=True)
class OrderBook:
    """Snapshot inmutable de asks y bids, ordenados alejándose del mark."""

    asks: tuple[OrderBookLevel, ...] = ()
    bids: tuple[OrderBookLevel, ...] = ()

    @classmethod
    def from_levels(
        cls,
        asks: Iterable[OrderBookLevel],
        bids: Iterable[OrderBookLevel],
    ) -> "OrderBook":
        """Construye el snapshot ordenando cada lado."""
        asks_t = _sorted_side(asks, BookSide.ASK)
        bids_t = _sorted_side(bids, BookSide.BID)
        for side_levels in (asks_t, bids_t):
            ids = [lv.id for lv in side_levels]
            if len(ids) != len(set(ids)):
                raise InvalidArgumentError("ids de nivel duplicados en un lado", field="id")
        return cls(asks=asks_t, bids=bids_t)

    def side(self, side: BookSide) -> tuple[OrderBookLevel, ...]:
        return self.asks if side is BookSide.ASK else self.bids

    @property
    def is_empty(self) -> bool:
        return not self.asks and not self.bids

    def to_dict(self) -> dict:
        return {
            "asks": [lv.to_dict() for lv in self.asks],
            "bids": [lv.to_dict() for lv in self.bids],
        }
