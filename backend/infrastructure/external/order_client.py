"""
Order Service Client.

Cliente HTTP (aiohttp) del colaborador externo que autentica usuarios y
registra órdenes:

  POST /auth/login      {username, password} → {token, user}
  POST /auth/register   {username, password} → {token, user}
  POST /api/orders      Authorization: Bearer <token>, body OrderTicket

El token es una credencial opaca. Cualquier respuesta no-2xx o fallo de red
se traduce en OrderRejectedError, sin reintentos: la UI lo muestra como toast.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from backend.domain.entities.order_ticket import OrderTicket
from backend.domain.exceptions.domain_errors import OrderRejectedError
from backend.shared.logging.logger import get_logger

logger = get_logger("order_client")


@dataclass(frozen=True)
class AuthSession:
    token: str
    user: dict


class OrderClient:

    def __init__(
        self,
        base_url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def login(self, username: str, password: str) -> AuthSession:
        return await self._authenticate("/auth/login", username, password)

    async def register(self, username: str, password: str) -> AuthSession:
        return await self._authenticate("/auth/register", username, password)

    async def submit_order(self, ticket: OrderTicket, token: str) -> dict:
        """Envía la orden; devuelve la orden creada por el servicio."""
        if not token:
            raise OrderRejectedError("Se requiere sesión iniciada para operar")
        headers = {"Authorization": f"Bearer {token}"}
        created = await self._post("/api/orders", ticket.to_payload(), headers=headers)
        logger.info(
            "Orden enviada: %s %s %s x%s",
            ticket.side.value, ticket.type.value, ticket.symbol, ticket.amount,
        )
        return created

    async def _authenticate(self, path: str, username: str, password: str) -> AuthSession:
        if not username or not password:
            raise OrderRejectedError("Username and password required", status=400)
        data = await self._post(path, {"username": username, "password": password})
        try:
            return AuthSession(token=data["token"], user=data["user"])
        except (KeyError, TypeError) as e:
            raise OrderRejectedError(f"Respuesta de auth inválida: {e}") from e

    async def _post(self, path: str, body: dict, headers: Optional[dict] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with self._get_session().post(
                url, json=body, headers=headers, timeout=self._timeout,
            ) as response:
                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError):
                    data = None
                if not 200 <= response.status < 300:
                    message = data.get("error") if isinstance(data, dict) else None
                    logger.warning("POST %s rechazado: HTTP %d", path, response.status)
                    raise OrderRejectedError(
                        message or f"HTTP {response.status}", status=response.status,
                    )
                return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Error de red en POST %s: %s", path, e)
            raise OrderRejectedError(f"Servicio de órdenes no disponible: {e}") from e
