"""
DepthDesk – API Routes (FastAPI)
=================================
Endpoints REST y WebSocket para el dashboard.

Endpoints disponibles:
  WS   /ws/market                 → streaming + hover/crosshair por cliente
  GET  /api/health                → health check
  GET  /api/status                → estado de poller, libro y clientes WS
  GET  /api/candles               → velas del snapshot vigente
  GET  /api/chart                 → velas + MA + volumen (memoizado)
  GET  /api/indicators            → resumen SMA/EMA/RSI/ATR + overlays MA
  GET  /api/orderbook             → libro con profundidad, mark y ratios
  GET  /api/orderbook/selection   → stats del rango [0..index] de un lado
  POST /api/refresh               → reintento manual del poll
  POST /api/auth/login            → proxy al servicio de órdenes
  POST /api/auth/register         → proxy al servicio de órdenes
  POST /api/orders                → proxy al servicio de órdenes
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, WebSocket, WebSocketDisconnect

from backend.domain.entities.order_book import BookSide
from backend.domain.entities.order_ticket import OrderSide, OrderTicket, OrderType
from backend.domain.exceptions.domain_errors import InvalidArgumentError, OrderRejectedError
from backend.presentation.api.schemas import (
    CandlesResponse,
    CredentialsRequest,
    HealthResponse,
    OrderRequest,
    RangeStatsResponse,
)
from backend.presentation.websocket.client_session import ClientSession
from backend.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Referencias a componentes inyectados desde main.py
_container = None


def init_routes(container) -> None:
    """Inyectar el contenedor de dependencias al arrancar."""
    global _container
    _container = container


# ─── WebSocket endpoint para streaming a frontend ─────────────────────

@router.websocket("/ws/market")
async def market_stream(websocket: WebSocket) -> None:
    """
    WebSocket endpoint principal.
    El broadcast de snapshots y libro lo maneja WebSocketManager; aquí solo
    se gestiona el ciclo de vida de la conexión y los mensajes de hover y
    crosshair del cliente.
    """
    if _container is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    ws_manager = _container.ws_manager
    await ws_manager.connect(websocket)
    session = ClientSession(
        websocket,
        order_book=_container.order_book,
        poller=_container.poller,
        min_interval=_container.settings.hover_min_interval,
    )
    session.start()
    try:
        while True:
            try:
                data = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            session.handle_message(data)
    finally:
        try:
            await session.close()
        finally:
            ws_manager.disconnect(websocket)


# ─── REST endpoints de estado ──────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "depthdesk"}


@router.get("/api/status")
async def system_status() -> dict:
    """Estado del poller, del libro y de los clientes conectados."""
    if _container is None:
        return {"error": "Server not ready"}
    return {
        "symbol": _container.settings.symbol,
        "poller": _container.poller.stats,
        "snapshot": _container.poller.snapshot.to_dict(include_candles=False),
        "order_book": _container.order_book.stats,
        "ws_clients": _container.ws_manager.client_count,
    }


# ─── REST endpoints de velas e indicadores ─────────────────────────────

@router.get("/api/candles", response_model=CandlesResponse)
async def get_candles(count: int = Query(default=200, ge=1, le=1000)) -> dict:
    """Últimas N velas del snapshot vigente."""
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")

    snapshot = _container.poller.snapshot
    candles = snapshot.candles[-count:]
    return {
        "source": snapshot.source_label,
        "version": snapshot.version,
        "count": len(candles),
        "mark_price": snapshot.mark_price,
        "mark_price_stale": snapshot.mark_price_stale,
        "candles": [c.to_dict() for c in candles],
    }


@router.get("/api/chart")
async def get_chart() -> dict:
    """Datos completos del chart; se recalculan solo con un snapshot nuevo."""
    if _container is None:
        return {"error": "Server not ready"}
    return _container.chart_view.build(_container.poller.snapshot).to_dict()


@router.get("/api/indicators")
async def get_indicators() -> dict:
    """Overlays de medias móviles (MA7 / MA25 / MA99) del snapshot actual."""
    if _container is None:
        return {"error": "Server not ready"}

    snapshot = _container.poller.snapshot
    if snapshot.is_empty:
        return {"symbol": _container.settings.symbol, "status": "no_data"}

    view = _container.chart_view.build(snapshot)
    return {
        "symbol": _container.settings.symbol,
        "version": view.version,
        "moving_averages": {
            name: [p.to_dict() for p in points]
            for name, points in view.moving_averages.items()
        },
    }


@router.post("/api/refresh")
async def refresh() -> dict:
    """Reintento manual. No-op si ya hay un fetch en vuelo."""
    if _container is None:
        return {"error": "Server not ready"}

    snapshot = await _container.poller.refresh()
    if snapshot is None:
        return {"status": "skipped"}
    return {"status": "ok", "snapshot": snapshot.to_dict(include_candles=False)}


# ─── REST endpoints del libro ──────────────────────────────────────────

@router.get("/api/orderbook")
async def get_order_book() -> dict:
    """Libro vigente con barras de profundidad, mark price y ratios."""
    if _container is None:
        return {"error": "Server not ready"}
    return _container.order_book.view().to_dict()


@router.get("/api/orderbook/selection", response_model=RangeStatsResponse)
async def get_selection(
    side: str = Query(description="ask | bid"),
    index: Optional[int] = Query(default=None, description="Índice con hover"),
) -> dict:
    """Stats del tramo [0..index] del lado indicado."""
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    try:
        book_side = BookSide(side)
    except ValueError:
        error = InvalidArgumentError(f"Lado inválido: {side}", field="side", value=side)
        raise HTTPException(status_code=400, detail=error.to_dict())

    stats = _container.order_book.selection_stats(book_side, index)
    return {"side": book_side.value, "hovered_index": index, **stats.to_dict()}


# ─── Proxy al servicio de órdenes ──────────────────────────────────────

def _rejected(error: OrderRejectedError) -> HTTPException:
    return HTTPException(status_code=error.status or 502, detail=error.to_dict())


@router.post("/api/auth/login")
async def login(body: CredentialsRequest) -> dict:
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    try:
        auth = await _container.order_client.login(body.username, body.password)
    except OrderRejectedError as e:
        raise _rejected(e)
    return {"token": auth.token, "user": auth.user}


@router.post("/api/auth/register")
async def register(body: CredentialsRequest) -> dict:
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    try:
        auth = await _container.order_client.register(body.username, body.password)
    except OrderRejectedError as e:
        raise _rejected(e)
    return {"token": auth.token, "user": auth.user}


@router.post("/api/orders")
async def submit_order(
    body: OrderRequest,
    authorization: Optional[str] = Header(default=None),
) -> dict:
    """Valida el ticket y lo reenvía con el token del usuario."""
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")

    token = ""
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):]
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        ticket = OrderTicket(
            symbol=body.symbol,
            side=OrderSide(body.side),
            type=OrderType(body.type),
            amount=body.amount,
            price=body.price,
            leverage=body.leverage,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    try:
        created = await _container.order_client.submit_order(ticket, token)
    except OrderRejectedError as e:
        raise _rejected(e)
    return {"status": "ok", "order": created, "notional": ticket.notional}
