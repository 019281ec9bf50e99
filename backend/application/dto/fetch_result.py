"""
DepthDesk – Application DTO: Fetch Result
==========================================
Tipo resultado devuelto por los proveedores de datos de mercado.

Los fallos del feed se capturan en la frontera del adapter y se convierten
en FetchResult.fail(...); la capa de aplicación nunca ve excepciones de red.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

from backend.domain.entities.candle import Candle
from backend.domain.exceptions.domain_errors import FetchUnavailableError

T = TypeVar("T")


class FetchErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"          # red caída / HTTP no-2xx / timeout
    INVALID_PAYLOAD = "invalid_payload"  # respuesta 2xx con cuerpo inválido


@dataclass(frozen=True)
class FetchError:
    kind: FetchErrorKind
    message: str
    status: Optional[int] = None

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message, "status": self.status}


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[FetchError] = None

    @classmethod
    def ok(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        kind: FetchErrorKind,
        message: str,
        status: Optional[int] = None,
    ) -> "FetchResult[T]":
        return cls(error=FetchError(kind=kind, message=message, status=status))

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Valor del fetch; un fallo se re-lanza como FetchUnavailableError."""
        if self.error is not None:
            raise FetchUnavailableError(self.error.message, status=self.error.status)
        return self.value


@dataclass(frozen=True)
class CandleBatch:
    """Velas de un fetch + etiqueta de la fuente que las produjo."""

    candles: tuple[Candle, ...] = field(default_factory=tuple)
    source_label: str = ""
