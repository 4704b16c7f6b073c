"""
Data module for the scroll chart.

Contains the closing price loader, record schemas, the fixed revenue table
and a synthetic price series generator.
"""

from scrollvis.data.local_loader import SeriesLoadResult, load_series, prepare_series
from scrollvis.data.schemas import (
    APPLE_REVENUE,
    DEFAULT_RELEASE_MARKERS,
    BarDatum,
    ReleaseMarker,
    RevenueRecord,
    TimeSeriesPoint,
)

__all__ = [
    # Data loading
    "SeriesLoadResult",
    "load_series",
    "prepare_series",
    # Schemas
    "APPLE_REVENUE",
    "DEFAULT_RELEASE_MARKERS",
    "BarDatum",
    "ReleaseMarker",
    "RevenueRecord",
    "TimeSeriesPoint",
]
