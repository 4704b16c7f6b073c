"""
Tests for scrollvis/data/local_loader.py

Row parsing, skipping and counting of malformed rows, and fatal loads.
"""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from scrollvis.data.local_loader import (
    load_series,
    load_table,
    parse_row,
    prepare_series,
)
from scrollvis.exceptions import DataLoadError, DataValidationError


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """A small CSV with one malformed row."""
    path = tmp_path / "data.csv"
    path.write_text(
        "date,close\n"
        "09/17/14,101.58\n"
        "09/18/14,101.79\n"
        "09/19/14,97.53\n"
        "not-a-date,100.00\n"
        "09/22/14,100.96\n"
    )
    return path


@pytest.fixture
def good_rows() -> list[dict[str, str]]:
    return [
        {"date": "01/02/14", "close": "79.02"},
        {"date": "01/03/14", "close": "77.28"},
        {"date": "01/06/14", "close": "77.70"},
    ]


# =============================================================================
# ROW PARSING TESTS
# =============================================================================


class TestParseRow:
    """Tests for parse_row."""

    def test_parses_date_and_close(self) -> None:
        """Test a well-formed row."""
        point = parse_row({"date": "09/19/14", "close": "97.53"}, row_number=1)
        assert point.date == date(2014, 9, 19)
        assert point.close == 97.53

    def test_strips_whitespace(self) -> None:
        """Test surrounding whitespace is ignored."""
        point = parse_row({"date": " 09/19/14 ", "close": " 97.53 "}, row_number=1)
        assert point.close == 97.53

    def test_custom_date_format(self) -> None:
        """Test a different strptime format."""
        point = parse_row({"date": "2014-09-19", "close": "97.53"}, row_number=1, date_format="%Y-%m-%d")
        assert point.date == date(2014, 9, 19)

    @pytest.mark.parametrize(
        "row, field",
        [
            ({"close": "97.53"}, "date"),
            ({"date": "09/19/14"}, "close"),
            ({"date": "", "close": "97.53"}, "date"),
            ({"date": "2014/19/09", "close": "97.53"}, "date"),
            ({"date": "09/19/14", "close": "n/a"}, "close"),
            ({"date": "09/19/14", "close": "-1"}, "close"),
            ({"date": "09/19/14", "close": "inf"}, "close"),
        ],
    )
    def test_malformed_rows(self, row: dict[str, str], field: str) -> None:
        """Test each kind of malformed row raises with its field and row number."""
        with pytest.raises(DataValidationError) as exc_info:
            parse_row(row, row_number=7)
        assert exc_info.value.context["field"] == field
        assert exc_info.value.context["row"] == 7


# =============================================================================
# SERIES PREPARATION TESTS
# =============================================================================


class TestPrepareSeries:
    """Tests for prepare_series."""

    def test_all_rows_valid(self, good_rows: list[dict[str, str]]) -> None:
        """Test every good row becomes a point, in order."""
        result = prepare_series(good_rows)
        assert result.valid_rows == 3
        assert result.skipped_rows == 0
        assert [p.close for p in result.points] == [79.02, 77.28, 77.70]

    def test_skips_and_counts_malformed(self, good_rows: list[dict[str, str]]) -> None:
        """Test malformed rows are excluded and counted."""
        rows = good_rows[:1] + [{"date": "x", "close": "1"}, {"date": "01/03/14", "close": ""}] + good_rows[1:]
        result = prepare_series(rows)
        assert result.total_rows == 5
        assert result.valid_rows == 3
        assert result.skipped_rows == 2
        assert len(result.errors) == 2

    def test_skips_non_increasing_dates(self, good_rows: list[dict[str, str]]) -> None:
        """Test a repeated or earlier date is treated as malformed."""
        rows = good_rows + [{"date": "01/03/14", "close": "80.00"}]
        result = prepare_series(rows)
        assert result.valid_rows == 3
        assert result.skipped_rows == 1

    def test_dates_strictly_increasing(self, good_rows: list[dict[str, str]]) -> None:
        """Test the resulting series is strictly ordered."""
        points = prepare_series(good_rows).points
        assert all(a.date < b.date for a, b in zip(points, points[1:]))

    def test_empty_input(self) -> None:
        """Test no rows gives an empty result rather than an error."""
        result = prepare_series([])
        assert result.points == []
        assert result.total_rows == 0
        assert result.skipped_rows == 0

    def test_logs_skipped_rows(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a warning is logged per skipped row."""
        with caplog.at_level("WARNING"):
            prepare_series([{"date": "bad", "close": "1"}])
        assert "Skipping row" in caplog.text


# =============================================================================
# FILE LOADING TESTS
# =============================================================================


class TestLoadSeries:
    """Tests for load_table and load_series."""

    def test_load_series(self, csv_file: Path) -> None:
        """Test loading a CSV skips the malformed row."""
        result = load_series(csv_file)
        assert result.total_rows == 5
        assert result.valid_rows == 4
        assert result.skipped_rows == 1
        assert result.points[2].close == 97.53

    def test_load_table_keeps_text(self, csv_file: Path) -> None:
        """Test cells are kept as raw text."""
        rows = load_table(csv_file)
        assert rows[0] == {"date": "09/17/14", "close": "101.58"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is a load error."""
        with pytest.raises(DataLoadError) as exc_info:
            load_series(tmp_path / "missing.csv")
        assert "missing.csv" in exc_info.value.context["path"]

    def test_no_usable_rows_is_fatal(self, tmp_path: Path) -> None:
        """Test a file with only malformed rows fails the load."""
        path = tmp_path / "bad.csv"
        path.write_text("date,close\nnope,1\n01/02/14,abc\n")
        with pytest.raises(DataLoadError) as exc_info:
            load_series(path)
        assert exc_info.value.context["skipped_rows"] == 2
        assert exc_info.value.context["total_rows"] == 2

    def test_header_only_is_fatal(self, tmp_path: Path) -> None:
        """Test an empty table fails the load."""
        path = tmp_path / "empty.csv"
        path.write_text("date,close\n")
        with pytest.raises(DataLoadError):
            load_series(path)

    def test_unreadable_table(self, csv_file: Path) -> None:
        """Test pandas parse failures become load errors."""
        mock_pd = MagicMock()
        mock_pd.read_csv.side_effect = ValueError("bad table")
        with patch("scrollvis.data.local_loader._get_pandas", return_value=mock_pd):
            with pytest.raises(DataLoadError, match="bad table"):
                load_table(csv_file)
