"""
DepthDesk – Main Application Entry Point
=========================================
Orquesta los componentes del dashboard: poller de velas + ticker del libro
+ broadcast WebSocket.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el contenedor (las instancias se crean perezosamente)
  3. Lifespan startup:
     a. Iniciar WebSocketManager (broadcast a frontend)
     b. Iniciar MarketDataPoller (primer poll inmediato, luego cada N s)
     c. Iniciar ticker del libro (cada segundo)
  4. Lifespan shutdown:
     a. Detener todo en orden inverso y cerrar sesiones HTTP

FLUJO DE DATOS:
  Binance REST ─▸ BinanceKlineAdapter ─▸ MarketDataPoller ─▸ MarketSnapshot
       (fallo sin datos previos → SyntheticMarketAdapter)
       ─▸ EventBus(market_snapshot) ─▸ WebSocketManager ─▸ Frontend
  SyntheticOrderBookFeed ─▸ OrderBookViewUseCase ─▸ EventBus(orderbook) ─▸ ...
  uvicorn backend.main:app --host 0.0.0.0 --port 8888
  python -m backend.main            (host/port desde Settings)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.shared.logging.logger import setup_logging, get_logger
from backend.shared.config.settings import settings
from backend.presentation.api.routes import router, init_routes
from backend.container import init_container

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging(logging.DEBUG if settings.debug else logging.INFO)
logger = get_logger("main")

# ─── Contenedor de Dependencias ─────────────────────────────────────────
container = init_container(settings)


# ─── FastAPI Lifespan ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup/shutdown lifecycle de la aplicación.
    Poller y ticker del libro corren como tasks propios.
    """
    logger.info("=" * 60)
    logger.info("  DepthDesk - Market Dashboard v1.0")
    logger.info("  Símbolo: %s  (intervalo %s, %d velas)",
                settings.symbol, settings.kline_interval, settings.kline_limit)
    logger.info("  Feed: %s", container.market_data_provider.source_label)
    logger.info("  Fallback sintético: %s",
                "sí" if settings.synthetic_fallback and settings.use_external_feed else "no")
    logger.info("  Poll cada %.0fs, libro cada %.1fs",
                settings.poll_interval_seconds, settings.book_tick_seconds)
    logger.info("  Medias móviles: %s", ", ".join(f"MA{p}" for p in settings.ma_periods))
    logger.info("=" * 60)

    init_routes(container)

    await container.ws_manager.start()
    await container.poller.start()
    await container.order_book.start()

    logger.info("✓ Todos los componentes iniciados correctamente")

    yield  # ← La app está corriendo aquí

    # ── SHUTDOWN ──
    logger.info("Iniciando shutdown...")

    await container.order_book.stop()
    await container.poller.stop()
    await container.ws_manager.stop()

    await container.market_data_provider.close()
    await container.order_client.close()
    await container.event_publisher.unsubscribe_all()
    logger.info("✓ Shutdown completo")


# ─── FastAPI App ────────────────────────────────────────────────────────

app = FastAPI(
    title="DepthDesk",
    description="Dashboard de mercado: velas, medias móviles, volumen y libro L2 con selección por hover",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS para frontend local
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # En producción: restringir a dominios específicos
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rutas
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
