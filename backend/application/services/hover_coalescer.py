"""
DepthDesk – Application Service: Hover Coalescer
=================================================
Limita los recálculos disparados por el puntero (hover sobre el libro,
crosshair del chart) a uno cada `min_interval` segundos (~60fps).

ALGORITMO (throttle con "último valor gana"):
  1. Si no hay flush programado, push(v) programa uno con loop.call_later.
  2. Mientras tanto, pushes posteriores solo sobrescriben el pendiente.
  3. Al disparar, el callback recibe SOLO el valor más reciente.

Un valor ya entregado se vuelve a entregar si llega de nuevo tras el flush:
el dato detrás del mismo hover (p.ej. el libro) puede haber cambiado.

cancel() anula el flush pendiente: tras desmontar la vista no se entrega nada.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Generic, Optional, TypeVar

from backend.shared.logging.logger import get_logger

logger = get_logger("hover_coalescer")

T = TypeVar("T")

_MISSING: Any = object()


class HoverCoalescer(Generic[T]):

    def __init__(
        self,
        callback: Callable[[T], Any],
        min_interval: float = 0.016,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._callback = callback
        self._min_interval = min_interval
        self._loop = loop
        self._pending: Any = _MISSING
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._tasks: set[asyncio.Task] = set()

        self.received = 0
        self.delivered = 0

    def push(self, value: T) -> None:
        if self._cancelled:
            return
        self.received += 1
        self._pending = value

        if self._handle is None:
            loop = self._loop or asyncio.get_running_loop()
            self._handle = loop.call_later(self._min_interval, self._flush)

    def _flush(self) -> None:
        self._handle = None
        if self._cancelled or self._pending is _MISSING:
            return
        value, self._pending = self._pending, _MISSING
        self.delivered += 1

        result = self._callback(value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Error en callback de hover: %s", task.exception())

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    @property
    def has_pending(self) -> bool:
        return self._handle is not None
