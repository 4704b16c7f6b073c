"""
Module: schemas

Purpose: Pydantic models for the datasets behind the scroll visualization.

All models use Pydantic v2 for validation with strict type hints.
"""

import datetime as dt
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODELS
# =============================================================================


class BaseSchema(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


# =============================================================================
# TIME SERIES
# =============================================================================


class TimeSeriesPoint(BaseSchema):
    """One trading day of the closing price series."""

    date: dt.date
    close: float

    @field_validator("close")
    @classmethod
    def validate_close(cls, v: float) -> float:
        """Closing prices must be finite and non-negative."""
        if not math.isfinite(v):
            raise ValueError(f"close must be finite, got {v}")
        if v < 0:
            raise ValueError(f"close must be non-negative, got {v}")
        return v


class ReleaseMarker(BaseSchema):
    """A highlighted trading day, matched on its closing price."""

    close: float
    label: str

    def matches(self, point: TimeSeriesPoint) -> bool:
        """Check whether a point is the marked trading day."""
        return point.close == self.close


DEFAULT_RELEASE_MARKERS: tuple[ReleaseMarker, ...] = (
    ReleaseMarker(close=97.53, label="iPhone 6/6 Plus Release"),
    ReleaseMarker(close=112.91, label="iPhone 6S/6S Plus Release"),
    ReleaseMarker(close=114.09, label="iPhone 7/7 Plus Release"),
)


# =============================================================================
# REVENUE TABLE
# =============================================================================


class RevenueRecord(BaseSchema):
    """Yearly revenue for one product line (millions of USD)."""

    product: str = Field(min_length=1)
    revenue_by_year: dict[str, int]

    def value_for(self, year: str) -> int | None:
        """Revenue for a year, or None if the year is not tracked."""
        return self.revenue_by_year.get(str(year))


class BarDatum(BaseSchema):
    """A revenue record projected onto a single year."""

    product: str
    value: int


APPLE_REVENUE: tuple[RevenueRecord, ...] = (
    RevenueRecord(product="iPhone", revenue_by_year={"2014": 101991, "2015": 155041, "2016": 136700}),
    RevenueRecord(product="iPad", revenue_by_year={"2014": 30283, "2015": 23227, "2016": 20628}),
    RevenueRecord(product="Mac", revenue_by_year={"2014": 18063, "2015": 25471, "2016": 22831}),
)


def product_names(records: tuple[RevenueRecord, ...] | list[RevenueRecord] = APPLE_REVENUE) -> list[str]:
    """Ordered product names, used as the bar category domain."""
    return [r.product for r in records]


def records_for_year(
    year: str,
    records: tuple[RevenueRecord, ...] | list[RevenueRecord] = APPLE_REVENUE,
) -> list[BarDatum]:
    """Project the revenue table onto one year.

    Records without a (truthy) value for the year are dropped, so a year
    missing for a product makes that product's bar exit.
    """
    data = []
    for record in records:
        value = record.value_for(year)
        if value:
            data.append(BarDatum(product=record.product, value=value))
    return data


def bar_key(datum: BarDatum) -> str:
    """Stable identity of a bar: its product name."""
    return datum.product
