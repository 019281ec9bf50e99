"""
DepthDesk – Infrastructure Layer
=================================
Implementaciones concretas de interfaces.

Este módulo contiene:
- external/: feed de klines (Binance), fuentes sintéticas, event bus,
  cliente del servicio de órdenes

REGLA DE DEPENDENCIA:
Esta capa implementa interfaces definidas en application/ports/.

Puede importar de:
- domain/ (entidades, servicios)
- application/ (ports, dto)
- shared/ (config, logging)
"""
