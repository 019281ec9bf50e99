"""
DepthDesk – Use Case: Order Book View
======================================
Mantiene el libro vigente y calcula lo que pinta el panel L2:
barras de profundidad por lado, mark price y ratios compra/venta,
más las estadísticas del rango seleccionado con hover.

PROPIEDAD:
El OrderBook vigente se REEMPLAZA entero en cada tick del feed; la vista
derivada se recalcula una vez por libro y se reutiliza entre lecturas.

El ticker periódico (start/stop) sigue el mismo patrón de ciclo de vida
que MarketDataPoller.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from backend.application.dto.views import OrderBookView
from backend.application.ports.event_publisher import IEventPublisher, ORDERBOOK_TOPIC
from backend.application.ports.order_book_feed import IOrderBookFeed
from backend.domain.entities.order_book import BookSide, MarkPrice, OrderBook
from backend.domain.services.depth_aggregator import DepthAggregator
from backend.domain.services.range_selection import RangeSelectionStats
from backend.domain.value_objects.series import PressureRatios, RangeStats, SelectionRange
from backend.shared.logging.logger import get_logger

logger = get_logger("order_book")


class OrderBookViewUseCase:

    def __init__(
        self,
        feed: IOrderBookFeed,
        event_publisher: Optional[IEventPublisher] = None,
        tick_seconds: float = 1.0,
    ) -> None:
        self._feed = feed
        self._publisher = event_publisher
        self._tick_seconds = tick_seconds

        self._book = OrderBook()
        self._mark: Optional[MarkPrice] = None
        self._ratios = PressureRatios(0.0, 0.0)
        self._view: Optional[OrderBookView] = None

        self._task: Optional[asyncio.Task] = None
        self._torn_down = False
        self._updates = 0

    @property
    def book(self) -> OrderBook:
        return self._book

    @property
    def mark_price(self) -> Optional[MarkPrice]:
        return self._mark

    # ════════════════════════════════════════════════════════════════
    #  Actualización del libro
    # ════════════════════════════════════════════════════════════════

    def apply(self, book: OrderBook, pressure: Optional[PressureRatios] = None) -> OrderBookView:
        """
        Reemplaza el libro vigente y recalcula mark + ratios.

        Sin `pressure` explícita se deriva del size de cada lado.
        """
        mark = DepthAggregator.compute_mark_price(book, previous=self._mark)
        if pressure is None:
            ratios = DepthAggregator.pressure_from_book(book)
        else:
            ratios = DepthAggregator.compute_ratios(pressure.buy, pressure.sell)

        view = OrderBookView(
            asks=DepthAggregator.compute_depth(book.asks),
            bids=DepthAggregator.compute_depth(book.bids),
            mark_price=mark if mark is not None else self._mark,
            ratios=ratios,
        )
        # Reemplazo conjunto: libro, mark, ratios y vista de la misma versión
        self._book, self._mark, self._ratios, self._view = book, view.mark_price, ratios, view
        self._updates += 1
        return view

    def update_from_feed(self) -> OrderBookView:
        return self.apply(self._feed.next_book(), self._feed.next_pressure())

    def view(self) -> OrderBookView:
        if self._view is None:
            return OrderBookView()
        return self._view

    def selection_stats(self, side: BookSide, hovered_index: Optional[int]) -> RangeStats:
        """Stats del tramo [0..hovered_index] del lado `side`."""
        selection = SelectionRange(side=side, hovered_index=hovered_index)
        return RangeSelectionStats.compute_stats(self._book.side(side), selection)

    # ════════════════════════════════════════════════════════════════
    #  Lifecycle del ticker
    # ════════════════════════════════════════════════════════════════

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._torn_down = False
        self._task = asyncio.create_task(self._run(), name="order-book-ticker")
        logger.info("Ticker del libro iniciado (cada %.1fs)", self._tick_seconds)

    async def stop(self) -> None:
        self._torn_down = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Ticker del libro detenido")

    async def _run(self) -> None:
        while not self._torn_down:
            view = self.update_from_feed()
            if self._publisher is not None:
                await self._publisher.publish(ORDERBOOK_TOPIC, view.to_dict())
            await asyncio.sleep(self._tick_seconds)

    @property
    def stats(self) -> dict:
        return {
            "running": self._task is not None and not self._task.done(),
            "updates": self._updates,
            "asks": len(self._book.asks),
            "bids": len(self._book.bids),
            "mark_price": self._mark.to_dict() if self._mark else None,
            "ratios": self._ratios.to_dict(),
        }
