"""Domain value objects."""
from backend.domain.value_objects.session import (
    DEFAULT_SESSIONS,
    SessionSpec,
    TrendKind,
    TrendState,
)
from backend.domain.value_objects.series import (
    ColorClass,
    DepthRow,
    IndicatorPoint,
    PressureRatios,
    RangeStats,
    SelectionRange,
    VolumeBar,
)

__all__ = [
    "DEFAULT_SESSIONS",
    "SessionSpec",
    "TrendKind",
    "TrendState",
    "ColorClass",
    "DepthRow",
    "IndicatorPoint",
    "PressureRatios",
    "RangeStats",
    "SelectionRange",
    "VolumeBar",
]
