"""
DepthDesk – Use Case: Poll Market Data
=======================================
Polling periódico del proveedor de velas + mark price.

CICLO DE VIDA:
  start() → adquiere un task asyncio que llama poll_once() cada
            `poll_interval` segundos.
  stop()  → marca el poller como desmontado y cancela el task. Ningún
            tick corre después, y un fetch en vuelo se descarta al llegar.

DEDUPLICACIÓN:
  Como máximo UN fetch pendiente. Un poll_once() (timer o refresh manual)
  que llega con otro en vuelo es un no-op.

ATOMICIDAD:
  Velas y mark price se piden en paralelo (asyncio.gather) y se aplican
  JUNTOS en un MarketSnapshot nuevo. No hay await entre construir el
  snapshot y publicarlo como vigente → nadie ve una actualización parcial.

FALLOS:
  - velas OK + mark falla → velas nuevas con mark anterior (stale=True)
  - velas fallan          → se conservan las anteriores y se registra error;
                            si no había ninguna, se usa el fallback sintético
                            (una sola vez por poll, no es cadena de proveedores)
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from backend.application.dto.fetch_result import CandleBatch, FetchResult
from backend.application.dto.market_snapshot import MarketSnapshot
from backend.application.ports.event_publisher import IEventPublisher, MARKET_SNAPSHOT_TOPIC
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.shared.logging.logger import get_logger

logger = get_logger("market_poller")


class MarketDataPoller:
    """Dueño único del MarketSnapshot vigente."""

    def __init__(
        self,
        provider: IMarketDataProvider,
        event_publisher: Optional[IEventPublisher] = None,
        fallback: Optional[IMarketDataProvider] = None,
        poll_interval: float = 120.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider
        self._publisher = event_publisher
        self._fallback = fallback
        self._poll_interval = poll_interval
        self._clock = clock

        self._snapshot = MarketSnapshot()
        self._task: Optional[asyncio.Task] = None
        self._in_flight = False
        self._torn_down = False

        # Stats
        self._polls = 0
        self._failures = 0
        self._skipped = 0
        self._discarded = 0

    @property
    def snapshot(self) -> MarketSnapshot:
        return self._snapshot

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ════════════════════════════════════════════════════════════════
    #  Lifecycle
    # ════════════════════════════════════════════════════════════════

    async def start(self) -> None:
        """Lanzar el loop de polling (el primer poll es inmediato)."""
        if self.is_running:
            logger.warning("MarketDataPoller ya está corriendo")
            return
        self._torn_down = False
        self._task = asyncio.create_task(self._run(), name="market-data-poller")
        logger.info(
            "MarketDataPoller iniciado (fuente=%s, intervalo=%.0fs)",
            self._provider.source_label, self._poll_interval,
        )

    async def stop(self) -> None:
        """Desmontar: ningún resultado posterior muta el snapshot."""
        self._torn_down = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("MarketDataPoller detenido")

    async def _run(self) -> None:
        while not self._torn_down:
            await self.poll_once()
            await asyncio.sleep(self._poll_interval)

    # ════════════════════════════════════════════════════════════════
    #  Polling
    # ════════════════════════════════════════════════════════════════

    async def refresh(self) -> Optional[MarketSnapshot]:
        """Acción manual de reintento (botón "retry" de la UI)."""
        return await self.poll_once()

    async def poll_once(self) -> Optional[MarketSnapshot]:
        """
        Un ciclo de polling.

        Returns:
            El snapshot nuevo, o None si el poll se omitió (otro en vuelo)
            o se descartó (poller desmontado).
        """
        if self._in_flight:
            self._skipped += 1
            logger.debug("Poll omitido: ya hay un fetch en vuelo")
            return None

        self._in_flight = True
        try:
            candles_res, mark_res = await asyncio.gather(
                self._provider.fetch(),
                self._provider.fetch_mark_price(),
            )
            fallback_res: Optional[FetchResult[CandleBatch]] = None
            if (
                not candles_res.is_ok
                and self._snapshot.is_empty
                and self._fallback is not None
            ):
                fallback_res = await self._fallback.fetch()
        finally:
            self._in_flight = False

        if self._torn_down:
            self._discarded += 1
            logger.debug("Resultado de poll descartado: poller desmontado")
            return None

        snapshot = self._merge(candles_res, mark_res, fallback_res)
        self._snapshot = snapshot
        self._polls += 1

        if self._publisher is not None:
            await self._publisher.publish(MARKET_SNAPSHOT_TOPIC, snapshot.to_dict())
        return snapshot

    def _merge(
        self,
        candles_res: FetchResult[CandleBatch],
        mark_res: FetchResult[float],
        fallback_res: Optional[FetchResult[CandleBatch]],
    ) -> MarketSnapshot:
        prev = self._snapshot
        error = None

        if candles_res.is_ok:
            candles = candles_res.value.candles
            label = candles_res.value.source_label
        else:
            self._failures += 1
            error = candles_res.error
            logger.warning(
                "Fetch de velas falló (%s): %s", error.kind.value, error.message,
            )
            if fallback_res is not None and fallback_res.is_ok:
                candles = fallback_res.value.candles
                label = fallback_res.value.source_label
                logger.info("Usando %d velas de fallback (%s)", len(candles), label)
            else:
                candles = prev.candles
                label = prev.source_label

        if mark_res.is_ok:
            mark: Optional[float] = mark_res.value
            stale = False
        else:
            logger.warning("Fetch de mark price falló: %s", mark_res.error.message)
            if prev.mark_price is not None:
                mark = prev.mark_price
            elif candles:
                mark = candles[-1].close
            else:
                mark = None
            stale = True

        return MarketSnapshot(
            version=prev.version + 1,
            candles=tuple(candles),
            source_label=label,
            mark_price=mark,
            mark_price_stale=stale,
            fetched_at=self._clock(),
            error=error,
        )

    @property
    def stats(self) -> dict:
        return {
            "running": self.is_running,
            "source": self._provider.source_label,
            "poll_interval": self._poll_interval,
            "polls": self._polls,
            "failures": self._failures,
            "skipped": self._skipped,
            "discarded": self._discarded,
            "snapshot_version": self._snapshot.version,
        }
