"""
DepthDesk – Application Port: Market Data Provider
===================================================
Interfaz para obtener velas y mark price.

Los use cases solicitan datos; la infraestructura decide CÓMO obtenerlos
(feed REST externo, generador sintético, mock de tests...).

CONTRATO:
- Un único proveedor por llamada: no hay cadena de fallback aquí.
- Nunca lanza por fallos de red/HTTP: devuelve FetchResult.fail(...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backend.application.dto.fetch_result import CandleBatch, FetchResult


class IMarketDataProvider(ABC):
    """
    Interfaz para proveer datos de mercado.

    IMPLEMENTACIONES:
    - BinanceKlineAdapter (REST externo)
    - SyntheticMarketAdapter (demo / fallback)
    """

    @property
    @abstractmethod
    def source_label(self) -> str:
        """Etiqueta legible de la fuente (e.g. "binance:BTCUSDT")."""

    @abstractmethod
    async def fetch(self) -> FetchResult[CandleBatch]:
        """
        Obtiene la serie completa de velas.

        Returns:
            FetchResult con CandleBatch (velas ordenadas por time ASC)
        """

    @abstractmethod
    async def fetch_mark_price(self) -> FetchResult[float]:
        """Obtiene el precio de referencia actual."""

    async def close(self) -> None:
        """Libera recursos (sesiones HTTP). Por defecto no hace nada."""
        return None
