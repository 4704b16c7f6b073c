"""
Tests for scrollvis/essays/scales.py

Tick generation, domain nicing, band layout and tick formatting.
"""

from datetime import date

import numpy as np
import pytest

from scrollvis.essays.scales import (
    BAR_VALUE_DOMAIN,
    BandScale,
    LinearScale,
    TimeScale,
    extent,
    format_si_currency,
    js_round,
    nice_domain,
    tick_increment,
    ticks,
)


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


class TestNumericHelpers:
    """Tests for rounding, extent and tick steps."""

    def test_js_round_half_up(self) -> None:
        """Test halves round towards positive infinity."""
        assert js_round(2.5) == 3
        assert js_round(-2.5) == -2
        assert js_round(2.4) == 2

    def test_extent(self) -> None:
        """Test extent returns min and max."""
        assert extent([3.0, 1.5, 9.25]) == (1.5, 9.25)

    def test_extent_empty_raises(self) -> None:
        """Test extent of nothing is an error."""
        with pytest.raises(ValueError):
            extent([])

    def test_tick_increment(self) -> None:
        """Test positive increments above 1 and inverse increments below."""
        assert tick_increment(0, 160000, 3) == 50000
        assert tick_increment(0, 1, 10) == -10

    def test_ticks_bar_domain(self) -> None:
        """Test three ticks over the fixed revenue domain."""
        assert ticks(*BAR_VALUE_DOMAIN, 3) == [0, 50000, 100000, 150000]

    def test_ticks_fractional(self) -> None:
        """Test ticks below 1 avoid floating point noise."""
        assert ticks(0, 1, 5) == [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]

    def test_ticks_reversed(self) -> None:
        """Test reversed domains give reversed ticks."""
        assert ticks(10, 0, 2) == [10, 5, 0]

    def test_ticks_degenerate(self) -> None:
        """Test empty count and single-value domains."""
        assert ticks(0, 10, 0) == []
        assert ticks(5, 5, 3) == [5]


class TestNiceDomain:
    """Tests for domain nicing."""

    def test_nice_price_extent(self) -> None:
        """Test a closing price extent extends to round values."""
        assert nice_domain(90.34, 118.25) == (90, 120)

    def test_nice_small_values(self) -> None:
        """Test nicing below 1."""
        assert nice_domain(0.5, 9.7) == (0, 10)

    def test_nice_keeps_reversed_order(self) -> None:
        """Test a reversed domain stays reversed."""
        assert nice_domain(118.25, 90.34) == (120, 90)


class TestTickFormat:
    """Tests for '$,s' style tick labels."""

    def test_bar_axis_labels(self) -> None:
        """Test revenue ticks share the k prefix."""
        labels = format_si_currency([0, 50000, 100000, 150000], 0, 160000, 3)
        assert labels == ["$0k", "$50k", "$100k", "$150k"]

    def test_price_axis_labels(self) -> None:
        """Test plain dollar labels below a thousand."""
        labels = format_si_currency([90, 100, 110, 120], 90, 120, 3)
        assert labels == ["$90", "$100", "$110", "$120"]


# =============================================================================
# LINEAR SCALE
# =============================================================================


class TestLinearScale:
    """Tests for LinearScale."""

    def test_maps_domain_to_range(self) -> None:
        """Test endpoints and midpoint."""
        scale = LinearScale((0, 100), (0, 800))
        assert scale(0) == 0
        assert scale(50) == 400
        assert scale(100) == 800

    def test_inverted_range(self) -> None:
        """Test y-style ranges map the maximum to 0."""
        scale = LinearScale((0, 160000), (520, 0), round_output=True)
        assert scale(0) == 520
        assert scale(160000) == 0
        assert scale(136700) == 76

    def test_round_output(self) -> None:
        """Test rounded output uses half-up rounding."""
        scale = LinearScale((0, 2), (0, 5), round_output=True)
        assert scale(1) == 3

    def test_values_outside_domain_extrapolate(self) -> None:
        """Test values beyond the domain are not clamped."""
        scale = LinearScale((0, 10), (0, 100))
        assert scale(20) == 200

    def test_map_many_matches_scalar(self) -> None:
        """Test the vectorized path agrees with single calls."""
        scale = LinearScale((90, 120), (520, 0), round_output=True)
        values = [90, 97.53, 112.91, 120]
        assert list(scale.map_many(values)) == [scale(v) for v in values]

    def test_invert(self) -> None:
        """Test invert is the inverse mapping."""
        scale = LinearScale((0, 100), (0, 800))
        assert scale.invert(400) == pytest.approx(50)

    def test_nice_returns_self(self) -> None:
        """Test nice() updates the domain in place."""
        scale = LinearScale((90.34, 118.25), (520, 0))
        assert scale.nice() is scale
        assert scale.domain == (90, 120)

    def test_copy_is_independent(self) -> None:
        """Test copying does not share the domain."""
        scale = LinearScale((0, 1), (0, 10))
        clone = scale.copy()
        clone.domain = (0, 2)
        assert scale.domain == (0, 1)

    def test_tick_format(self) -> None:
        """Test the fixed bar domain labels."""
        scale = LinearScale(BAR_VALUE_DOMAIN, (520, 0))
        assert scale.tick_format(3) == ["$0k", "$50k", "$100k", "$150k"]


# =============================================================================
# TIME SCALE
# =============================================================================


class TestTimeScale:
    """Tests for TimeScale."""

    @pytest.fixture
    def scale(self) -> TimeScale:
        return TimeScale((date(2014, 1, 2), date(2016, 12, 30)), (0, 800), round_output=True)

    def test_endpoints(self, scale: TimeScale) -> None:
        """Test domain endpoints hit the range endpoints."""
        assert scale(date(2014, 1, 2)) == 0
        assert scale(date(2016, 12, 30)) == 800

    def test_monotonic(self, scale: TimeScale) -> None:
        """Test later dates map further right."""
        xs = scale.map_many([date(2014, 6, 1), date(2015, 6, 1), date(2016, 6, 1)])
        assert np.all(np.diff(xs) > 0)

    def test_domain_keeps_dates(self, scale: TimeScale) -> None:
        """Test the domain property returns what was set."""
        scale.domain = (date(2015, 1, 5), date(2015, 3, 2))
        assert scale.domain == (date(2015, 1, 5), date(2015, 3, 2))
        assert scale(date(2015, 1, 5)) == 0

    def test_yearly_ticks(self, scale: TimeScale) -> None:
        """Test three ticks over three years land on New Year."""
        assert scale.tick_interval(3) == "year"
        assert scale.ticks(3) == [date(2015, 1, 1), date(2016, 1, 1)]
        assert scale.tick_format(3) == ["2015", "2016"]

    def test_monthly_ticks(self) -> None:
        """Test a quarter-long domain gets month ticks."""
        scale = TimeScale((date(2015, 1, 5), date(2015, 4, 10)), (0, 800))
        assert scale.tick_interval(3) == "month"
        assert scale.ticks(3) == [date(2015, 2, 1), date(2015, 3, 1), date(2015, 4, 1)]
        assert scale.tick_format(3) == ["February", "March", "April"]

    def test_invert_roundtrips_day(self, scale: TimeScale) -> None:
        """Test invert returns the mapped date."""
        assert scale.invert(0).date() == date(2014, 1, 2)
        assert scale.invert(800).date() == date(2016, 12, 30)


# =============================================================================
# BAND SCALE
# =============================================================================


class TestBandScale:
    """Tests for BandScale."""

    @pytest.fixture
    def scale(self) -> BandScale:
        return BandScale(["iPhone", "iPad", "Mac"], (0, 800), padding=0.2)

    def test_slots(self, scale: BandScale) -> None:
        """Test the three product slots."""
        assert scale("iPhone") == 50
        assert scale("iPad") == 300
        assert scale("Mac") == 550

    def test_bandwidth_and_step(self, scale: BandScale) -> None:
        """Test band width and step."""
        assert scale.bandwidth == 200
        assert scale.step == 250

    def test_unknown_category(self, scale: BandScale) -> None:
        """Test unknown categories raise KeyError."""
        with pytest.raises(KeyError):
            scale("Watch")
        assert "Watch" not in scale

    def test_slot_independent_of_record_order(self) -> None:
        """Test a category's slot depends only on the domain."""
        scale = BandScale(["iPhone", "iPad", "Mac"], (0, 800), padding=0.2)
        assert [scale(p) for p in ("Mac", "iPhone")] == [550, 50]

    def test_ticks_are_domain(self, scale: BandScale) -> None:
        """Test ticks list the categories in order."""
        assert scale.ticks() == ["iPhone", "iPad", "Mac"]


class TestBarValueCeiling:
    """Tests for the fixed revenue ceiling."""

    def test_values_above_ceiling_overflow(self) -> None:
        """Test values past the ceiling map above the plot without rescaling."""
        scale = LinearScale(BAR_VALUE_DOMAIN, (520, 0), round_output=True)
        assert scale(200000) < 0
        assert scale(160000) == 0
