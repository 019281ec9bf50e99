"""Application services - orquestación sin estado de dominio."""
from backend.application.services.hover_coalescer import HoverCoalescer
from backend.application.services.crosshair import CrosshairTracker

__all__ = ["HoverCoalescer", "CrosshairTracker"]
