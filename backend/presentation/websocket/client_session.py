"""
DepthDesk – WebSocket Client Session
=====================================
Estado por conexión WS: hover sobre el libro y crosshair del chart.

MENSAJES DEL CLIENTE:
  {"type": "hover", "side": "ask"|"bid", "index": int|null}
  {"type": "crosshair", "time": int|null}

MENSAJES AL CLIENTE:
  {"type": "selection", "data": {side, hovered_index, avg_price, ...}}
  {"type": "crosshair", "data": {time, open, high, low, close} | null}

Cada flujo pasa por su propio HoverCoalescer: como mucho un recálculo cada
~16ms, siempre con el valor más reciente. Todos los envíos salen por una
única cola (outbox) drenada por un task, así los callbacks son síncronos.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect

from backend.application.services.crosshair import CrosshairTracker
from backend.application.services.hover_coalescer import HoverCoalescer
from backend.application.use_cases.order_book_usecase import OrderBookViewUseCase
from backend.application.use_cases.poll_market_data_usecase import MarketDataPoller
from backend.domain.entities.candle import Candle
from backend.domain.entities.order_book import BookSide
from backend.shared.logging.logger import get_logger

logger = get_logger("ws_client")


class ClientSession:

    def __init__(
        self,
        websocket: WebSocket,
        order_book: OrderBookViewUseCase,
        poller: MarketDataPoller,
        min_interval: float = 0.016,
    ) -> None:
        self._ws = websocket
        self._order_book = order_book
        self._poller = poller
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=256)
        self._sender: Optional[asyncio.Task] = None

        self._tracker = CrosshairTracker()
        self._series_version = -1
        self._unsubscribe = self._tracker.subscribe(self._on_crosshair_point)

        self._selection = HoverCoalescer(self._deliver_selection, min_interval)
        self._crosshair = HoverCoalescer(self._tracker.move, min_interval)

    def start(self) -> None:
        self._sender = asyncio.create_task(self._drain(), name="ws-client-sender")

    async def close(self) -> None:
        """Teardown: nada pendiente se entrega después de esto."""
        self._selection.cancel()
        self._crosshair.cancel()
        self._unsubscribe()
        if self._sender is None:
            return
        if self._sender.done():
            if not self._sender.cancelled() and self._sender.exception() is not None:
                logger.warning("Sender WS terminó con error: %s", self._sender.exception())
            return
        self._sender.cancel()
        try:
            await self._sender
        except asyncio.CancelledError:
            pass

    # ════════════════════════════════════════════════════════════════
    #  Entrada
    # ════════════════════════════════════════════════════════════════

    def handle_message(self, raw: str) -> None:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Mensaje WS no-JSON ignorado: %s", raw[:100])
            return
        if not isinstance(message, dict):
            return

        kind = message.get("type")
        if kind == "hover":
            try:
                side = BookSide(message.get("side"))
            except ValueError:
                logger.debug("Lado de hover inválido: %s", message.get("side"))
                return
            index = message.get("index")
            self._selection.push((side, index if isinstance(index, int) else None))
        elif kind == "crosshair":
            self._sync_series()
            time = message.get("time")
            self._crosshair.push(time if isinstance(time, (int, float)) else None)

    def _sync_series(self) -> None:
        snapshot = self._poller.snapshot
        if snapshot.version != self._series_version:
            self._tracker.set_series(snapshot.candles)
            self._series_version = snapshot.version

    # ════════════════════════════════════════════════════════════════
    #  Salida
    # ════════════════════════════════════════════════════════════════

    def _deliver_selection(self, value: tuple[BookSide, Optional[int]]) -> None:
        side, index = value
        stats = self._order_book.selection_stats(side, index)
        data = {"side": side.value, "hovered_index": index, **stats.to_dict()}
        self._enqueue("selection", data)

    def _on_crosshair_point(self, point: Optional[Candle]) -> None:
        self._enqueue("crosshair", point.to_dict() if point else None)

    def _enqueue(self, event_type: str, data: Any) -> None:
        if self._outbox.full():
            try:
                self._outbox.get_nowait()
            except asyncio.QueueEmpty:
                pass
        self._outbox.put_nowait(json.dumps({"type": event_type, "data": data}))

    async def _drain(self) -> None:
        while True:
            payload = await self._outbox.get()
            try:
                await asyncio.wait_for(self._ws.send_text(payload), timeout=5.0)
            except asyncio.TimeoutError:
                logger.warning("Timeout enviando a cliente WS; mensaje descartado")
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("Cliente WS cerrado durante envío: %s", e)
                return
