"""
DepthDesk – Presentation Layer
===============================
API HTTP y WebSocket.

Este módulo contiene:
- api/: FastAPI routes y schemas
- websocket/: broadcast y sesiones por cliente (hover / crosshair)

REGLA DE DEPENDENCIA:
Esta capa SOLO llama a use cases de application/ a través del contenedor.
"""

from backend.presentation.api.routes import router, init_routes
from backend.presentation.websocket.websocket_manager import WebSocketManager

__all__ = [
    "router",
    "init_routes",
    "WebSocketManager",
]
