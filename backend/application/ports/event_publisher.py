"""
DepthDesk – Application Port: Event Publisher
==============================================
Interfaz para publicar eventos hacia consumidores (WebSocket, etc.).

Los use cases publican; la infraestructura decide CÓMO entregar.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional

# Tópicos estándar
MARKET_SNAPSHOT_TOPIC = "market_snapshot"
ORDERBOOK_TOPIC = "orderbook"


class IEventPublisher(ABC):
    """
    Interfaz para publicar eventos del sistema.

    IMPLEMENTACIONES POSIBLES:
    - EventBusAdapter (memoria/async, fan-out con asyncio.Queue)
    """

    @abstractmethod
    async def publish(self, topic: str, data: Any) -> None:
        """Publica un evento a todos los suscriptores de `topic`."""

    @abstractmethod
    async def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """Registra un consumidor y devuelve su cola exclusiva."""

    @abstractmethod
    async def unsubscribe_all(self, topic: Optional[str] = None) -> None:
        """Elimina suscriptores de un tópico (o de todos)."""
