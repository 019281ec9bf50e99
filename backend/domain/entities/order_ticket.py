"""
DepthDesk – Domain Entity: Order Ticket
========================================
Orden que el usuario envía al servicio externo de órdenes.

REGLAS (las mismas que aplica el formulario de trading):
- market → price se fuerza a None
- limit / stop → price obligatorio y > 0
- amount > 0, leverage >= 1
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from backend.domain.exceptions.domain_errors import InvalidArgumentError


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"


@dataclass(frozen=True, slots=True)
class OrderTicket:
    symbol: str
    side: OrderSide
    type: OrderType
    amount: float
    price: Optional[float] = None
    leverage: float = 1.0

    def __post_init__(self) -> None:
        if not self.symbol:
            raise InvalidArgumentError("symbol requerido", field="symbol")
        if self.amount <= 0:
            raise InvalidArgumentError("amount debe ser > 0", field="amount", value=self.amount)
        if self.leverage < 1:
            raise InvalidArgumentError("leverage debe ser >= 1", field="leverage", value=self.leverage)
        if self.type is OrderType.MARKET:
            object.__setattr__(self, "price", None)
        elif self.price is None or self.price <= 0:
            raise InvalidArgumentError(
                f"price requerido y > 0 para órdenes {self.type.value}",
                field="price", value=self.price,
            )

    @property
    def notional(self) -> Optional[float]:
        """Total estimado (price × amount); None para market."""
        return None if self.price is None else self.price * self.amount

    def to_payload(self) -> dict:
        """Cuerpo JSON de POST /api/orders."""
        return {
            "symbol": self.symbol,
            "side": self.side.value,
            "type": self.type.value,
            "price": self.price,
            "amount": self.amount,
            "leverage": self.leverage,
        }
