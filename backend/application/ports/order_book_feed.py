"""
DepthDesk – Application Port: Order Book Feed
==============================================
Fuente de snapshots L2 del libro y de la presión compra/venta.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backend.domain.entities.order_book import OrderBook
from backend.domain.value_objects.series import PressureRatios


class IOrderBookFeed(ABC):

    @abstractmethod
    def next_book(self) -> OrderBook:
        """Devuelve un snapshot NUEVO del libro (nunca muta el anterior)."""

    @abstractmethod
    def next_pressure(self) -> PressureRatios:
        """Presión compra/venta cruda; el caller la clampa."""
