"""
DepthDesk – WebSocket Manager (broadcast a clientes frontend)
==============================================================
Gestiona conexiones WebSocket de clientes frontend y les envía los
snapshots de mercado y del libro en tiempo real.

ARQUITECTURA:
  EventBus ──(market_snapshot)──▸ WSManager._broadcast_loop()
  EventBus ──(orderbook)────────▸ WSManager._broadcast_loop()
       │
       ▼
  [Cliente WS 1, Cliente WS 2, ...]

NO BLOQUEA EL LOOP PRINCIPAL:
- El broadcast corre como task independiente por tópico.
- El envío a cada cliente usa asyncio.wait_for con timeout para evitar
  que un cliente lento congele el broadcast.
- Un cliente que falla se elimina sin afectar a los demás.
"""

from __future__ import annotations

import asyncio
import json
from typing import Set

from fastapi import WebSocket, WebSocketDisconnect

from backend.application.ports.event_publisher import (
    IEventPublisher,
    MARKET_SNAPSHOT_TOPIC,
    ORDERBOOK_TOPIC,
)
from backend.shared.logging.logger import get_logger

logger = get_logger("ws_manager")


class WebSocketManager:
    """Gestiona conexiones frontend y broadcast de datos en tiempo real."""

    def __init__(self, event_bus: IEventPublisher) -> None:
        self._event_bus = event_bus
        self._clients: Set[WebSocket] = set()
        self._broadcast_tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        """Lanzar loops de broadcast para todos los tópicos."""
        snapshot_queue = await self._event_bus.subscribe(
            MARKET_SNAPSHOT_TOPIC, "ws_broadcast_snapshot"
        )
        orderbook_queue = await self._event_bus.subscribe(
            ORDERBOOK_TOPIC, "ws_broadcast_orderbook"
        )
        self._broadcast_tasks = [
            asyncio.create_task(
                self._broadcast_loop(snapshot_queue, MARKET_SNAPSHOT_TOPIC),
                name="ws-broadcast-snapshot",
            ),
            asyncio.create_task(
                self._broadcast_loop(orderbook_queue, ORDERBOOK_TOPIC),
                name="ws-broadcast-orderbook",
            ),
        ]
        logger.info("WebSocketManager iniciado – broadcast de market_snapshot y orderbook")

    async def stop(self) -> None:
        """Cancelar broadcast y cerrar todos los clientes."""
        for task in self._broadcast_tasks:
            task.cancel()
        for task in self._broadcast_tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._broadcast_tasks = []

        for ws in list(self._clients):
            try:
                await ws.close()
            except RuntimeError:
                # ya cerrado por el cliente
                pass
        self._clients.clear()
        logger.info("WebSocketManager detenido")

    async def connect(self, websocket: WebSocket) -> None:
        """Registrar un nuevo cliente WebSocket."""
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Cliente WS conectado. Total: %d", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        """Des-registrar un cliente desconectado."""
        self._clients.discard(websocket)
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    async def _broadcast_loop(self, queue: asyncio.Queue, event_type: str) -> None:
        """Consume eventos de una Queue y los envía a todos los clientes."""
        while True:
            data = await queue.get()
            if not self._clients:
                continue

            payload = json.dumps({"type": event_type, "data": data})

            disconnected: list[WebSocket] = []
            await asyncio.gather(
                *(self._safe_send(ws, payload, disconnected) for ws in list(self._clients))
            )
            for ws in disconnected:
                self._clients.discard(ws)

    async def _safe_send(
        self, ws: WebSocket, payload: str, disconnected: list[WebSocket]
    ) -> None:
        """
        Enviar payload a un cliente con timeout.
        Si falla, marcar como desconectado para limpieza.
        """
        try:
            await asyncio.wait_for(ws.send_text(payload), timeout=5.0)
        except (WebSocketDisconnect, asyncio.TimeoutError, RuntimeError) as e:
            logger.debug("Envío WS fallido (%s); cliente eliminado", type(e).__name__)
            disconnected.append(ws)

    @property
    def client_count(self) -> int:
        return len(self._clients)
