"""Helpers compartidos: constructores de velas/niveles y una sesión aiohttp falsa."""

from __future__ import annotations

from typing import Any

from backend.domain.entities.candle import Candle
from backend.domain.entities.order_book import OrderBook, OrderBookLevel


def make_candle(time: int, open_: float, close: float, high: float | None = None, low: float | None = None) -> Candle:
    return Candle(
        time=time,
        open=open_,
        high=high if high is not None else max(open_, close),
        low=low if low is not None else min(open_, close),
        close=close,
    )


def make_book() -> OrderBook:
    asks = [
        OrderBookLevel(id="ask-1", price=101.0, size=1.0, volume=10.0),
        OrderBookLevel(id="ask-2", price=102.0, size=2.0, volume=50.0),
    ]
    bids = [
        OrderBookLevel(id="bid-1", price=99.0, size=3.0, volume=30.0),
        OrderBookLevel(id="bid-2", price=98.0, size=1.0, volume=40.0),
    ]
    return OrderBook.from_levels(asks=asks, bids=bids)


class FakeResponse:
    def __init__(self, status: int = 200, payload: Any = None, json_error: Exception | None = None) -> None:
        self.status = status
        self._payload = payload
        self._json_error = json_error

    async def json(self) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeSession:
    """
    Sustituto de aiohttp.ClientSession: `routes` mapea sufijo de URL →
    FakeResponse o excepción a lanzar.
    """

    def __init__(self, routes: dict[str, Any]) -> None:
        self._routes = routes
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        for suffix, response in self._routes.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(status=404, payload={"error": "not found"})

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, **kwargs)

    async def close(self) -> None:
        self.closed = True
