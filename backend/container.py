"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias que
gestiona todas las instancias de servicios, adapters y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.
"""

from dataclasses import dataclass, field
from typing import Optional

# Domain
from backend.domain.services.candle_series_generator import CandleSeriesGenerator
from backend.domain.services.indicator_calculator import IndicatorCalculator

# Application
from backend.application.ports.event_publisher import IEventPublisher
from backend.application.ports.market_data_provider import IMarketDataProvider
from backend.application.ports.order_book_feed import IOrderBookFeed
from backend.application.use_cases.chart_view_usecase import ChartViewUseCase
from backend.application.use_cases.order_book_usecase import OrderBookViewUseCase
from backend.application.use_cases.poll_market_data_usecase import MarketDataPoller

# Shared
from backend.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Cada dependencia se crea perezosamente la primera vez que se pide y se
    comparte (singleton por contenedor). override() permite sustituirlas
    por mocks en tests.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Domain Services
    _indicator_calculator: Optional[IndicatorCalculator] = None

    # Ports (implementaciones concretas)
    _event_publisher: Optional[IEventPublisher] = None
    _market_data_provider: Optional[IMarketDataProvider] = None
    _synthetic_provider: Optional[IMarketDataProvider] = None
    _order_book_feed: Optional[IOrderBookFeed] = None

    # Use Cases (con estado: uno por contenedor)
    _poller: Optional[MarketDataPoller] = None
    _chart_view: Optional[ChartViewUseCase] = None
    _order_book: Optional[OrderBookViewUseCase] = None

    # Presentation / externos
    _ws_manager: Optional[object] = None
    _order_client: Optional[object] = None

    # ==================== Domain Services ====================

    @property
    def indicator_calculator(self) -> IndicatorCalculator:
        """Obtiene o crea IndicatorCalculator (singleton)."""
        if self._indicator_calculator is None:
            self._indicator_calculator = IndicatorCalculator(
                range_weight=self.settings.volume_range_factor,
            )
        return self._indicator_calculator

    # ==================== Ports ====================

    @property
    def event_publisher(self) -> IEventPublisher:
        """Obtiene el event bus (fan-out en memoria)."""
        if self._event_publisher is None:
            from backend.infrastructure.external.event_bus_adapter import EventBusAdapter
            self._event_publisher = EventBusAdapter()
        return self._event_publisher

    @property
    def synthetic_provider(self) -> IMarketDataProvider:
        """Proveedor sintético (demo y fallback)."""
        if self._synthetic_provider is None:
            from backend.infrastructure.external.synthetic_adapter import SyntheticMarketAdapter
            generator = CandleSeriesGenerator(base_price=self.settings.synthetic_base_price)
            self._synthetic_provider = SyntheticMarketAdapter(
                generator,
                count=self.settings.synthetic_candles,
                interval_seconds=self.settings.synthetic_interval_seconds,
            )
        return self._synthetic_provider

    @property
    def market_data_provider(self) -> IMarketDataProvider:
        """Proveedor principal: feed externo o sintético según settings."""
        if self._market_data_provider is None:
            if self.settings.use_external_feed:
                from backend.infrastructure.external.binance_adapter import BinanceKlineAdapter
                self._market_data_provider = BinanceKlineAdapter(self.settings)
            else:
                self._market_data_provider = self.synthetic_provider
        return self._market_data_provider

    @property
    def order_book_feed(self) -> IOrderBookFeed:
        if self._order_book_feed is None:
            from backend.infrastructure.external.synthetic_order_book import SyntheticOrderBookFeed
            self._order_book_feed = SyntheticOrderBookFeed(
                mid_price=self.settings.synthetic_base_price,
                levels_per_side=self.settings.book_levels_per_side,
                price_step=self.settings.book_price_step,
            )
        return self._order_book_feed

    # ==================== Use Cases ====================

    @property
    def poller(self) -> MarketDataPoller:
        if self._poller is None:
            fallback = None
            if self.settings.synthetic_fallback and self.settings.use_external_feed:
                fallback = self.synthetic_provider
            self._poller = MarketDataPoller(
                provider=self.market_data_provider,
                event_publisher=self.event_publisher,
                fallback=fallback,
                poll_interval=self.settings.poll_interval_seconds,
            )
        return self._poller

    @property
    def chart_view(self) -> ChartViewUseCase:
        if self._chart_view is None:
            self._chart_view = ChartViewUseCase(
                self.indicator_calculator, ma_periods=self.settings.ma_periods,
            )
        return self._chart_view

    @property
    def order_book(self) -> OrderBookViewUseCase:
        if self._order_book is None:
            self._order_book = OrderBookViewUseCase(
                self.order_book_feed,
                event_publisher=self.event_publisher,
                tick_seconds=self.settings.book_tick_seconds,
            )
        return self._order_book

    # ==================== Presentation / externos ====================

    @property
    def ws_manager(self):
        if self._ws_manager is None:
            from backend.presentation.websocket.websocket_manager import WebSocketManager
            self._ws_manager = WebSocketManager(self.event_publisher)
        return self._ws_manager

    @property
    def order_client(self):
        if self._order_client is None:
            from backend.infrastructure.external.order_client import OrderClient
            self._order_client = OrderClient(
                self.settings.orders_base_url,
                timeout_seconds=self.settings.feed_timeout_seconds,
            )
        return self._order_client

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._indicator_calculator = None
        self._event_publisher = None
        self._market_data_provider = None
        self._synthetic_provider = None
        self._order_book_feed = None
        self._poller = None
        self._chart_view = None
        self._order_book = None
        self._ws_manager = None
        self._order_client = None

    def override(self, name: str, instance) -> None:
        """
        Override una dependencia (útil para tests con mocks).

        Args:
            name: Nombre de la dependencia (ej: 'market_data_provider')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Obtiene la instancia global del contenedor.

    Patrón Singleton para asegurar una única instancia
    compartida en toda la aplicación.
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Resetea el contenedor global."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.
    """
    global _container
    _container = Container(settings=settings or Settings())
    return _container


def create_test_container(settings: Optional[Settings] = None, **mocks) -> Container:
    """
    Crea un contenedor de pruebas con mocks inyectados.

    Ejemplo:
        container = create_test_container(
            market_data_provider=fake_provider,
        )
    """
    container = Container(settings=settings or Settings())
    for name, mock in mocks.items():
        container.override(name, mock)
    return container
