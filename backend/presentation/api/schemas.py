"""
DepthDesk – API Schemas (Pydantic)
===================================
Schemas de validación para request/response de la API REST.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str


class CandleSchema(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float


class CandlesResponse(BaseModel):
    source: str
    version: int
    count: int
    mark_price: Optional[float] = None
    mark_price_stale: bool = False
    candles: list[CandleSchema]


class RangeStatsResponse(BaseModel):
    side: Literal["ask", "bid"]
    hovered_index: Optional[int] = None
    avg_price: float
    total_volume_value: float
    total_size: float


class OrderRequest(BaseModel):
    """Body de POST /api/orders (se reenvía al servicio de órdenes)."""
    symbol: str
    side: Literal["buy", "sell"]
    type: Literal["market", "limit", "stop"] = "market"
    price: Optional[float] = None
    amount: float = Field(gt=0)
    leverage: float = Field(default=1.0, ge=1)


class CredentialsRequest(BaseModel):
    """Body de POST /api/auth/login y /api/auth/register."""
    username: str = ""
    password: str = ""
