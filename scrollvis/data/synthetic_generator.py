"""
Module: synthetic_generator

Purpose: Generate a synthetic daily closing price table for demos and tests.

Generates a price series with:
- Deterministic generation with seed for reproducibility
- Trading days only (weekends skipped)
- The release-marker closes pinned on the iPhone release dates, so the
  highlighted dots and annotations have something to attach to
"""

import csv
from datetime import date, timedelta
from pathlib import Path

import numpy as np

from scrollvis.data.local_loader import DEFAULT_DATE_FORMAT
from scrollvis.data.schemas import DEFAULT_RELEASE_MARKERS, ReleaseMarker, TimeSeriesPoint


# =============================================================================
# CONSTANTS
# =============================================================================

RELEASE_DATES: tuple[date, ...] = (
    date(2014, 9, 19),
    date(2015, 9, 25),
    date(2016, 9, 16),
)

DEFAULT_START = date(2014, 1, 2)
DEFAULT_END = date(2016, 12, 30)


# =============================================================================
# SYNTHETIC DATA GENERATOR
# =============================================================================


class SyntheticSeriesGenerator:
    """
    Generate a reproducible closing price random walk.

    Usage:
        generator = SyntheticSeriesGenerator(seed=42)
        points = generator.generate()
        generator.write_csv("data/data.csv", points)
    """

    def __init__(
        self,
        seed: int = 42,
        *,
        start_price: float = 77.0,
        daily_volatility: float = 0.012,
        markers: tuple[ReleaseMarker, ...] = DEFAULT_RELEASE_MARKERS,
        release_dates: tuple[date, ...] = RELEASE_DATES,
    ):
        if len(markers) != len(release_dates):
            raise ValueError("Each release marker needs a release date")

        self.seed = seed
        self.start_price = start_price
        self.daily_volatility = daily_volatility
        self.pinned = dict(zip(release_dates, markers, strict=True))
        self.rng = np.random.default_rng(seed)

    def trading_days(self, start: date, end: date) -> list[date]:
        """Weekdays between start and end, inclusive."""
        days = []
        current = start
        while current <= end:
            if current.weekday() < 5:
                days.append(current)
            current += timedelta(days=1)
        return days

    def generate(self, start: date = DEFAULT_START, end: date = DEFAULT_END) -> list[TimeSeriesPoint]:
        """Generate one point per trading day.

        Args:
            start: First calendar day
            end: Last calendar day

        Returns:
            Points with strictly increasing dates
        """
        days = self.trading_days(start, end)
        returns = self.rng.normal(loc=0.0003, scale=self.daily_volatility, size=len(days))
        prices = self.start_price * np.exp(np.cumsum(returns))

        marker_closes = {m.close for m in self.pinned.values()}
        points = []
        for day, price in zip(days, prices, strict=True):
            if day in self.pinned:
                close = self.pinned[day].close
            else:
                close = round(float(price), 2)
                # Only the release days may carry a marker close
                while close in marker_closes:
                    close = round(close + 0.01, 2)
            points.append(TimeSeriesPoint(date=day, close=close))

        return points

    def write_csv(self, path: str | Path, points: list[TimeSeriesPoint] | None = None) -> Path:
        """Write points as a `date,close` table in MM/DD/YY format.

        Args:
            path: Output CSV path
            points: Points to write (default: freshly generated)

        Returns:
            Path written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        points = points if points is not None else self.generate()

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["date", "close"])
            for point in points:
                writer.writerow([point.date.strftime(DEFAULT_DATE_FORMAT), f"{point.close:.2f}"])

        return path
