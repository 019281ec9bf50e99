"""
DepthDesk – Domain Exceptions
==============================
Excepciones específicas del dominio.

JERARQUÍA:
    DomainError (base)
    ├── InvalidArgumentError    → parámetros inválidos, fatal para la llamada
    ├── FetchUnavailableError   → feed externo caído (HTTP/red)
    └── OrderRejectedError      → el servicio de órdenes rechazó la petición

Las listas vacías NO son un error: indicadores y agregaciones devuelven
resultados vacíos o en cero.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class InvalidArgumentError(DomainError):
    """Parámetro fuera de contrato (n <= 0, periodo <= 0, vela incoherente...)."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="INVALID_ARGUMENT")
        self.field = field
        self.value = value


class FetchUnavailableError(DomainError):
    """El proveedor externo no respondió con un 2xx o falló la red."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, code="FETCH_UNAVAILABLE")
        self.status = status


class OrderRejectedError(DomainError):
    """El servicio de órdenes/auth devolvió un error. No se reintenta."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, code="ORDER_REJECTED")
        self.status = status

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status"] = self.status
        return data
