"""
Tests for scrollvis/data/schemas.py and scrollvis/settings.py
"""

import math
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from scrollvis.data.schemas import (
    APPLE_REVENUE,
    DEFAULT_RELEASE_MARKERS,
    BarDatum,
    ReleaseMarker,
    RevenueRecord,
    TimeSeriesPoint,
    bar_key,
    product_names,
    records_for_year,
)
from scrollvis.settings import Settings, load_settings


# =============================================================================
# TIME SERIES TESTS
# =============================================================================


class TestTimeSeriesPoint:
    """Tests for TimeSeriesPoint."""

    def test_valid_point(self) -> None:
        """Test creating a point."""
        point = TimeSeriesPoint(date=date(2014, 9, 19), close=97.53)
        assert point.close == 97.53

    def test_frozen(self) -> None:
        """Test points are immutable."""
        point = TimeSeriesPoint(date=date(2014, 9, 19), close=97.53)
        with pytest.raises(ValidationError):
            point.close = 1.0

    @pytest.mark.parametrize("close", [-0.01, math.nan, math.inf])
    def test_rejects_bad_close(self, close: float) -> None:
        """Test negative and non-finite closes are rejected."""
        with pytest.raises(ValidationError):
            TimeSeriesPoint(date=date(2014, 9, 19), close=close)

    def test_rejects_extra_fields(self) -> None:
        """Test unknown fields are forbidden."""
        with pytest.raises(ValidationError):
            TimeSeriesPoint(date=date(2014, 9, 19), close=1.0, volume=10)


class TestReleaseMarker:
    """Tests for release markers."""

    def test_matches_on_close(self) -> None:
        """Test a marker matches points with exactly its close."""
        marker = ReleaseMarker(close=97.53, label="iPhone 6/6 Plus Release")
        assert marker.matches(TimeSeriesPoint(date=date(2014, 9, 19), close=97.53))
        assert not marker.matches(TimeSeriesPoint(date=date(2014, 9, 19), close=97.54))

    def test_default_markers(self) -> None:
        """Test the three launch markers."""
        assert [m.close for m in DEFAULT_RELEASE_MARKERS] == [97.53, 112.91, 114.09]
        assert DEFAULT_RELEASE_MARKERS[2].label == "iPhone 7/7 Plus Release"


# =============================================================================
# REVENUE TESTS
# =============================================================================


class TestRevenue:
    """Tests for the revenue table helpers."""

    def test_product_names_in_table_order(self) -> None:
        """Test the category domain order."""
        assert product_names() == ["iPhone", "iPad", "Mac"]

    def test_records_for_year(self) -> None:
        """Test projecting onto 2016."""
        data = records_for_year("2016")
        assert data == [
            BarDatum(product="iPhone", value=136700),
            BarDatum(product="iPad", value=20628),
            BarDatum(product="Mac", value=22831),
        ]

    def test_unknown_year_is_empty(self) -> None:
        """Test a year nobody tracks yields no bars."""
        assert records_for_year("2020") == []

    def test_missing_value_drops_product(self) -> None:
        """Test a product without a value for the year is left out."""
        table = [
            RevenueRecord(product="iPhone", revenue_by_year={"2016": 136700}),
            RevenueRecord(product="Watch", revenue_by_year={"2015": 1}),
        ]
        assert [d.product for d in records_for_year("2016", table)] == ["iPhone"]

    def test_value_for_accepts_int_year(self) -> None:
        """Test value_for converts the year to a string."""
        assert APPLE_REVENUE[0].value_for(2015) == 155041

    def test_bar_key_is_product(self) -> None:
        """Test bars are keyed by product."""
        assert bar_key(BarDatum(product="Mac", value=1)) == "Mac"


# =============================================================================
# SETTINGS TESTS
# =============================================================================


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test the default layout and timings."""
        settings = Settings()
        assert (settings.width, settings.height) == (800, 520)
        assert settings.margin.left == 20
        assert settings.margin.bottom == 40
        assert settings.outer_width == 830
        assert settings.outer_height == 560
        assert settings.section_duration_ms == 600
        assert settings.bar_duration_ms == 1000
        assert settings.zoom_duration_ms == 200

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test SCROLLVIS_ variables override defaults."""
        monkeypatch.setenv("SCROLLVIS_WIDTH", "640")
        monkeypatch.setenv("SCROLLVIS_MARGIN__LEFT", "30")
        settings = Settings()
        assert settings.width == 640
        assert settings.margin.left == 30

    def test_rejects_bad_padding(self) -> None:
        """Test band padding must be in [0, 1)."""
        with pytest.raises(ValidationError):
            Settings(bar_padding=1.5)

    def test_load_settings(self, tmp_path: Path) -> None:
        """Test YAML values are applied over defaults."""
        path = tmp_path / "settings.yaml"
        path.write_text("width: 600\nmargin:\n  left: 5\ndefault_year: '2015'\n")
        settings = load_settings(path)
        assert settings.width == 600
        assert settings.margin.left == 5
        assert settings.margin.bottom == 40
        assert settings.default_year == "2015"

    def test_load_settings_missing(self, tmp_path: Path) -> None:
        """Test a missing settings file raises."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")
