"""
DepthDesk – Domain Service: Range Selection Stats
==================================================
Estadísticas de un tramo contiguo del libro seleccionado por hover.

El hover sobre el índice k selecciona [0..k]: desde el interior del libro
(mejor precio del lado) hacia afuera hasta el nivel señalado.

  total_size         = Σ size
  total_volume_value = Σ total (price × size)
  avg_price          = Σ price / n   (media simple, no ponderada)
"""

from __future__ import annotations

from typing import Sequence

from backend.domain.entities.order_book import OrderBookLevel
from backend.domain.value_objects.series import RangeStats, SelectionRange


class RangeSelectionStats:
    """Servicio stateless."""

    @staticmethod
    def compute_stats(
        levels: Sequence[OrderBookLevel],
        selection: SelectionRange,
    ) -> RangeStats:
        selected = [levels[i] for i in selection.indices(len(levels))]
        if not selected:
            return RangeStats()

        return RangeStats(
            avg_price=sum(lv.price for lv in selected) / len(selected),
            total_volume_value=sum(lv.total for lv in selected),
            total_size=sum(lv.size for lv in selected),
        )
