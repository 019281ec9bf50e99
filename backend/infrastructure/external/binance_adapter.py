"""
Binance Kline Adapter.

Implementación de IMarketDataProvider sobre la API REST pública de Binance
(o cualquier feed que hable su formato de klines).

  GET {base}/api/v3/klines?symbol=&interval=&limit=
      → [[openTimeMs, "open", "high", "low", "close", "volume", closeTimeMs, ...], ...]
  GET {base}/api/v3/ticker/price?symbol=
      → {"symbol": "...", "price": "..."}

Los fallos NO salen de aquí como excepciones: HTTP no-2xx, errores de red y
timeouts → FetchResult.fail(UNAVAILABLE); cuerpo inválido → INVALID_PAYLOAD.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

import aiohttp

from backend.application.dto.fetch_result import CandleBatch, FetchErrorKind, FetchResult
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import InvalidArgumentError
from backend.shared.config.settings import Settings
from backend.shared.logging.logger import get_logger

logger = get_logger("binance_adapter")


def normalize_kline(record: Sequence[Any]) -> Candle:
    """
    Kline externo → Candle.

    time = openTimeMs // 1000 ; strings numéricos → float.
    """
    if not isinstance(record, (list, tuple)) or len(record) < 5:
        raise InvalidArgumentError("Kline con menos de 5 campos", field="kline", value=record)
    try:
        return Candle(
            time=int(record[0]) // 1000,
            open=float(record[1]),
            high=float(record[2]),
            low=float(record[3]),
            close=float(record[4]),
        )
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Kline no numérico: {e}", field="kline", value=record) from e


def normalize_klines(records: Sequence[Sequence[Any]]) -> list[Candle]:
    """Normaliza y garantiza times estrictamente crecientes y únicos."""
    by_time: dict[int, Candle] = {}
    for record in records:
        candle = normalize_kline(record)
        by_time[candle.time] = candle   # el último gana ante duplicados
    return [by_time[t] for t in sorted(by_time)]


class BinanceKlineAdapter(IMarketDataProvider):
    """
    Proveedor externo de velas + mark price.

    Acepta una aiohttp.ClientSession inyectada; si no, crea una propia de
    forma perezosa y la cierra en close().
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._owns_session = session is None

        self._requests = 0
        self._errors = 0

    @property
    def source_label(self) -> str:
        return f"binance:{self._settings.symbol.upper()}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ════════════════════════════════════════════════════════════════
    #  IMarketDataProvider
    # ════════════════════════════════════════════════════════════════

    async def fetch(self) -> FetchResult[CandleBatch]:
        params = {
            "symbol": self._settings.symbol.upper(),
            "interval": self._settings.kline_interval,
            "limit": min(int(self._settings.kline_limit), 1000),
        }
        result = await self._get_json("/api/v3/klines", params)
        if not result.is_ok:
            return FetchResult(error=result.error)

        data = result.value
        if not isinstance(data, list):
            return self._invalid("Respuesta de klines no es una lista")
        try:
            candles = normalize_klines(data)
        except InvalidArgumentError as e:
            return self._invalid(e.message)

        return FetchResult.ok(CandleBatch(candles=tuple(candles), source_label=self.source_label))

    async def fetch_mark_price(self) -> FetchResult[float]:
        params = {"symbol": self._settings.symbol.upper()}
        result = await self._get_json("/api/v3/ticker/price", params)
        if not result.is_ok:
            return FetchResult(error=result.error)
        try:
            return FetchResult.ok(float(result.value["price"]))
        except (KeyError, TypeError, ValueError):
            return self._invalid("Respuesta de ticker sin campo 'price' numérico")

    # ════════════════════════════════════════════════════════════════
    #  HTTP
    # ════════════════════════════════════════════════════════════════

    async def _get_json(self, path: str, params: dict) -> FetchResult[Any]:
        url = f"{self._settings.feed_base_url.rstrip('/')}{path}"
        timeout = aiohttp.ClientTimeout(total=self._settings.feed_timeout_seconds)
        self._requests += 1
        try:
            async with self._get_session().get(url, params=params, timeout=timeout) as response:
                if not 200 <= response.status < 300:
                    self._errors += 1
                    logger.warning("Feed respondió HTTP %d en %s", response.status, path)
                    return FetchResult.fail(
                        FetchErrorKind.UNAVAILABLE,
                        f"HTTP {response.status} en {path}",
                        status=response.status,
                    )
                try:
                    return FetchResult.ok(await response.json())
                except (aiohttp.ContentTypeError, ValueError) as e:
                    return self._invalid(f"JSON inválido en {path}: {e}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._errors += 1
            logger.warning("Error de red consultando %s: %s", path, e)
            return FetchResult.fail(FetchErrorKind.UNAVAILABLE, f"Error de red en {path}: {e}")

    def _invalid(self, message: str) -> FetchResult[Any]:
        self._errors += 1
        logger.warning("Payload inválido del feed: %s", message)
        return FetchResult.fail(FetchErrorKind.INVALID_PAYLOAD, message)

    @property
    def stats(self) -> dict:
        return {
            "source": self.source_label,
            "requests": self._requests,
            "errors": self._errors,
        }
