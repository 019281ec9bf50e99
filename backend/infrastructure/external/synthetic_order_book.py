"""
Synthetic Order Book Feed.

Implementación de IOrderBookFeed para el modo demo: un libro L2 alrededor de
un mid que se mueve en random walk, con jitter por tick en precio y size.

POR TICK:
  mid   += U[-5, 5)
  price  = mid ± step × (i + 1) + U[-5, 5)      (i = distancia al mark)
  size   = max(0.1, size + U[-0.05, 0.05))
  volume = Σ size desde el mejor precio hasta el nivel (profundidad acumulada)

Presión compra/venta: buy = max(10, U[0, 90)), sell = 100 - buy.
"""

from __future__ import annotations

from itertools import accumulate
from typing import Optional

from backend.application.ports.order_book_feed import IOrderBookFeed
from backend.domain.entities.order_book import BookSide, OrderBook, OrderBookLevel
from backend.domain.services.random_source import RandomSource, SystemRandomSource
from backend.domain.value_objects.series import PressureRatios

PRICE_JITTER = 5.0
SIZE_JITTER = 0.05
MIN_SIZE = 0.1
MIN_BUY_PRESSURE = 10.0


class SyntheticOrderBookFeed(IOrderBookFeed):

    def __init__(
        self,
        mid_price: float = 84320.0,
        levels_per_side: int = 17,
        price_step: float = 150.0,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._rng = rng or SystemRandomSource()
        self._mid = mid_price
        self._levels = levels_per_side
        self._step = price_step
        # Sizes iniciales crecientes hacia afuera (0.5, 0.55, 0.6, ...)
        self._sizes = {
            side: [round(0.5 + 0.05 * i, 5) for i in range(levels_per_side)]
            for side in BookSide
        }

    @property
    def mid_price(self) -> float:
        return self._mid

    def next_book(self) -> OrderBook:
        rng = self._rng
        self._mid = max(self._step * (self._levels + 1), self._mid + rng.uniform(-PRICE_JITTER, PRICE_JITTER))

        sides: dict[BookSide, list[OrderBookLevel]] = {}
        for side in BookSide:
            sign = 1 if side is BookSide.ASK else -1
            sizes = [
                round(max(MIN_SIZE, s + rng.uniform(-SIZE_JITTER, SIZE_JITTER)), 5)
                for s in self._sizes[side]
            ]
            self._sizes[side] = sizes
            depth = list(accumulate(sizes))
            sides[side] = [
                OrderBookLevel(
                    id=f"{side.value}-{i + 1}",
                    price=round(
                        self._mid + sign * self._step * (i + 1) + rng.uniform(-PRICE_JITTER, PRICE_JITTER),
                        2,
                    ),
                    size=size,
                    volume=round(depth[i], 5),
                )
                for i, size in enumerate(sizes)
            ]

        return OrderBook.from_levels(asks=sides[BookSide.ASK], bids=sides[BookSide.BID])

    def next_pressure(self) -> PressureRatios:
        buy = max(MIN_BUY_PRESSURE, self._rng.uniform(0.0, 90.0))
        return PressureRatios(buy=buy, sell=100.0 - buy)
