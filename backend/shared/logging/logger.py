"""
DepthDesk – Logging configuration
==================================
Un único handler a stdout en el root logger; cada componente pide el suyo
con get_logger("market_poller"), get_logger("ws_client")... y cuelga de "depthdesk.".

NIVEL: main.py pasa DEBUG si settings.debug, INFO en otro caso.
RUIDO: el access log de aiohttp (feed de velas, servicio de órdenes) y el de
uvicorn quedan en WARNING; los polls cada pocos segundos los inundarían.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """Configura el root logger una sola vez al arranque."""
    fmt = (
        "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    # Evitar handlers duplicados si se llama más de una vez
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(level)

    # Silenciar librerías ruidosas
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Fábrica de loggers con namespace prefijado."""
    return logging.getLogger(f"depthdesk.{name}")
