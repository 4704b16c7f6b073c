"""
Tests for scrollvis/essays/reconcile.py

Keyed enter/update/exit partitioning and the revenue bar join.
"""

import pytest

from scrollvis.data.schemas import BarDatum, records_for_year
from scrollvis.essays.reconcile import BarJoin, JoinResult, partition_keys
from scrollvis.essays.scales import BAR_VALUE_DOMAIN, BandScale, LinearScale
from scrollvis.essays.surface import Surface, Timing
from scrollvis.exceptions import ReconciliationError


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def surface() -> Surface:
    return Surface(830, 560)


@pytest.fixture
def bars(surface: Surface) -> BarJoin:
    return BarJoin(
        surface,
        BandScale(["iPhone", "iPad", "Mac"], (0, 800), padding=0.2),
        LinearScale(BAR_VALUE_DOMAIN, (520, 0), round_output=True),
        plot_height=520,
        timing=Timing(1000),
    )


def bar_attrs(surface: Surface) -> dict[str, dict]:
    return {rect.key: dict(rect.attrs) for rect in surface.select("bar")}


# =============================================================================
# PARTITION TESTS
# =============================================================================


class TestPartitionKeys:
    """Tests for partition_keys."""

    def test_examples(self) -> None:
        """Test the three-way split."""
        result = partition_keys(["iPhone", "Mac"], ["iPhone", "iPad"])
        assert result == JoinResult(enter=["Mac"], update=["iPhone"], exit=["iPad"])

    def test_nothing_rendered(self) -> None:
        """Test everything enters on an empty surface."""
        result = partition_keys(["iPhone", "iPad", "Mac"], [])
        assert result.enter == ["iPhone", "iPad", "Mac"]
        assert result.update == [] and result.exit == []

    def test_empty_target(self) -> None:
        """Test everything exits for an empty target set."""
        result = partition_keys([], ["iPhone", "iPad"])
        assert result.exit == ["iPhone", "iPad"]

    def test_to_dict(self) -> None:
        """Test serialization."""
        assert JoinResult(enter=["a"]).to_dict() == {"enter": ["a"], "update": [], "exit": []}


# =============================================================================
# BAR JOIN TESTS
# =============================================================================


class TestBarJoinEnter:
    """Tests for entering bars."""

    def test_first_render_enters_all(self, bars: BarJoin, surface: Surface) -> None:
        """Test the first reconcile creates one bar and one label per product."""
        result = bars.reconcile_bars(records_for_year("2016"))
        assert result.enter == ["iPhone", "iPad", "Mac"]
        assert len(surface.select("bar")) == 3
        assert len(surface.select("bar-text")) == 3

    def test_bars_grow_from_baseline(self, bars: BarJoin, surface: Surface) -> None:
        """Test new bars start at zero height on the baseline."""
        bars.reconcile_bars(records_for_year("2016"))
        rect = surface.select("bar")[0]
        assert rect.attrs["y"] == 520
        assert rect.attrs["height"] == 0.0

    def test_settled_geometry(self, bars: BarJoin, surface: Surface) -> None:
        """Test bars end at their value with slots from the category scale."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()

        attrs = bar_attrs(surface)
        assert attrs["iPhone"]["x"] == 50
        assert attrs["iPhone"]["width"] == 200
        assert attrs["iPhone"]["y"] == 76
        assert attrs["iPhone"]["height"] == 444
        assert attrs["iPad"]["x"] == 300
        assert attrs["iPad"]["y"] == 453
        assert attrs["Mac"]["x"] == 550
        assert attrs["Mac"]["y"] == 446

    def test_labels(self, bars: BarJoin, surface: Surface) -> None:
        """Test value labels sit above their bar."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()
        label = surface.select("bar-text")[0]
        assert label.text == "$136,700M"
        assert label.attrs["x"] == 150
        assert label.attrs["y"] == 70

    def test_slot_ignores_record_order(self, bars: BarJoin, surface: Surface) -> None:
        """Test a lone Mac bar still uses the Mac slot."""
        bars.reconcile_bars([BarDatum(product="Mac", value=22831)])
        assert surface.select("bar")[0].attrs["x"] == 550


class TestBarJoinUpdate:
    """Tests for updating bars."""

    def test_update_keeps_elements(self, bars: BarJoin, surface: Surface) -> None:
        """Test matching keys animate the existing elements."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()
        before = surface.select("bar")

        result = bars.reconcile_bars(records_for_year("2015"))
        surface.settle()

        assert result.update == ["iPhone", "iPad", "Mac"]
        assert result.enter == [] and result.exit == []
        assert surface.select("bar") == before
        assert bar_attrs(surface)["iPhone"]["y"] == 16
        assert surface.select("bar-text")[0].text == "$155,041M"

    def test_idempotent(self, bars: BarJoin, surface: Surface) -> None:
        """Test reconciling the same data twice changes nothing."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()
        snapshot = bar_attrs(surface)
        count = len(surface.elements)

        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()

        assert bar_attrs(surface) == snapshot
        assert len(surface.elements) == count


class TestBarJoinExit:
    """Tests for removing bars."""

    def test_exit_shrinks_then_removes(self, bars: BarJoin, surface: Surface) -> None:
        """Test exiting bars stay until their animation ends."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()

        result = bars.reconcile_bars([BarDatum(product="iPhone", value=136700)])
        assert result.exit == ["iPad", "Mac"]
        assert len(surface.select("bar")) == 3

        surface.advance(500)
        assert len(surface.select("bar")) == 3
        surface.settle()

        assert [r.key for r in surface.select("bar")] == ["iPhone"]
        assert [t.key for t in surface.select("bar-text")] == ["iPhone"]
        assert bars.keys() == ["iPhone"]

    def test_empty_target_removes_everything(self, bars: BarJoin, surface: Surface) -> None:
        """Test an empty record set exits every bar."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()

        bars.reconcile_bars([])
        surface.settle()

        assert surface.select("bar") == []
        assert bars.keys() == []

    def test_returning_key_cancels_removal(self, bars: BarJoin, surface: Surface) -> None:
        """Test a key coming back mid-exit is updated, not re-created."""
        bars.reconcile_bars(records_for_year("2016"))
        surface.settle()
        ipad = bar_attrs(surface)["iPad"]

        bars.reconcile_bars([BarDatum(product="iPhone", value=136700)])
        surface.advance(500)
        result = bars.reconcile_bars(records_for_year("2016"))
        surface.settle()

        assert result.update == ["iPhone", "iPad", "Mac"]
        assert result.enter == []
        assert len(surface.select("bar")) == 3
        assert bar_attrs(surface)["iPad"] == ipad

    def test_groups_animate_concurrently(self, bars: BarJoin, surface: Surface) -> None:
        """Test enter, update and exit share one timing."""
        bars.reconcile_bars([BarDatum(product="iPhone", value=136700), BarDatum(product="iPad", value=20628)])
        surface.settle()

        bars.reconcile_bars([BarDatum(product="iPhone", value=101991), BarDatum(product="Mac", value=18063)])
        ends = {a.end for a in surface.pending()}
        assert ends == {surface.now + 1000}


class TestBarJoinErrors:
    """Tests for invalid target sets."""

    def test_duplicate_keys(self, bars: BarJoin, surface: Surface) -> None:
        """Test duplicate products are rejected before anything is drawn."""
        data = [BarDatum(product="Mac", value=1), BarDatum(product="Mac", value=2)]
        with pytest.raises(ReconciliationError) as exc_info:
            bars.reconcile_bars(data)
        assert exc_info.value.duplicate_keys == ["Mac"]
        assert surface.elements == []

    @pytest.mark.parametrize("years", [["2016", "2014", "2015"], ["2014", "2014"], ["2015", "2020", "2016"]])
    def test_rendered_keys_match_last_target(self, bars: BarJoin, surface: Surface, years: list[str]) -> None:
        """Test the settled key set equals the last target key set."""
        for year in years:
            bars.reconcile_bars(records_for_year(year))
            surface.advance(300)
        surface.settle()
        expected = {d.product for d in records_for_year(years[-1])}
        assert set(bars.keys()) == expected
        assert {r.key for r in surface.select("bar")} == expected
