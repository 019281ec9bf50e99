"""
DepthDesk – Settings (Pydantic BaseSettings)
============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # ─── Feed externo de klines ─────────────────────────────────────────
    symbol: str = Field(default="BTCUSDT", description="Símbolo del feed externo")
    kline_interval: str = Field(default="1h", description="Intervalo de klines del feed")
    kline_limit: int = Field(default=200, description="Número de klines por petición")
    feed_base_url: str = Field(
        default="https://api.binance.com",
        description="URL base del proveedor de klines",
    )
    feed_timeout_seconds: float = Field(
        default=10.0, description="Timeout total (seg) de cada petición HTTP",
    )

    # ─── Polling ────────────────────────────────────────────────────────
    poll_interval_seconds: float = Field(
        default=120.0, description="Intervalo (seg) entre polls del feed",
    )
    use_external_feed: bool = Field(
        default=True, description="False → solo datos sintéticos",
    )
    synthetic_fallback: bool = Field(
        default=True,
        description="Usar velas sintéticas si el primer fetch falla",
    )

    # ─── Generador sintético ────────────────────────────────────────────
    synthetic_base_price: float = Field(default=84320.0, description="Precio inicial")
    synthetic_candles: int = Field(default=200, description="Velas a generar")
    synthetic_interval_seconds: int = Field(
        default=3600, description="Separación (seg) entre velas sintéticas",
    )

    # ─── Indicadores ────────────────────────────────────────────────────
    ma_periods: list[int] = Field(default=[7, 25, 99], description="Periodos de MA")
    volume_range_factor: float = Field(
        default=10.0, description="Peso del rango high-low en el volumen sintético",
    )

    # ─── Order book ─────────────────────────────────────────────────────
    book_levels_per_side: int = Field(default=17, description="Niveles por lado")
    book_price_step: float = Field(default=150.0, description="Distancia entre niveles")
    book_tick_seconds: float = Field(default=1.0, description="Refresco del libro (seg)")
    hover_min_interval: float = Field(
        default=0.016, description="Intervalo mínimo (seg) entre recálculos de hover",
    )

    # ─── Servicio de órdenes (colaborador externo) ──────────────────────
    orders_base_url: str = Field(default="http://localhost:3000")

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    debug: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
