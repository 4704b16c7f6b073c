"""
Local data loader for the closing price table.

Reads the `date,close` CSV table and converts its rows into
TimeSeriesPoint records for the line chart. Malformed rows are excluded
from the series and counted rather than aborting the load; a load that
yields no usable point at all is fatal.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from scrollvis.data.schemas import TimeSeriesPoint
from scrollvis.exceptions import DataLoadError, DataValidationError

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%m/%d/%y"

REQUIRED_COLUMNS = ("date", "close")


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class SeriesLoadResult:
    """Result of preparing the closing price series."""

    points: list[TimeSeriesPoint] = field(default_factory=list)

    # Statistics
    total_rows: int = 0
    skipped_rows: int = 0
    load_duration_ms: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def valid_rows(self) -> int:
        """Number of rows that made it into the series."""
        return len(self.points)


# =============================================================================
# TABLE LOADING
# =============================================================================


def _get_pandas() -> Any:
    """Lazy import of pandas."""
    try:
        import pandas as pd
    except ImportError:
        raise ImportError("pandas is required: pip install pandas")
    return pd


def load_table(path: str | Path) -> list[dict[str, str]]:
    """Read a CSV table into a list of string rows.

    Every cell is kept as text; typing is left to prepare_series so that
    a bad cell fails its own row instead of the whole table.

    Args:
        path: Path to the CSV file

    Returns:
        List of rows, each mapping column name to raw cell text

    Raises:
        DataLoadError: If the file is missing or cannot be parsed as a table
    """
    path = Path(path)

    if not path.exists():
        raise DataLoadError(f"Data file not found: {path}", path=str(path))

    pd = _get_pandas()

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except Exception as e:
        raise DataLoadError(f"Error reading {path}: {e}", path=str(path)) from e

    df.columns = [str(c).strip() for c in df.columns]
    rows: list[dict[str, str]] = df.to_dict("records")

    logger.info(f"Read {len(rows)} rows from {path}")
    return rows


# =============================================================================
# ROW PARSING
# =============================================================================


def parse_row(
    row: dict[str, Any],
    *,
    row_number: int,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> TimeSeriesPoint:
    """Convert one raw row into a TimeSeriesPoint.

    Args:
        row: Raw row with 'date' and 'close' cells
        row_number: 1-based data row number, used in error context
        date_format: strptime format of the date column

    Returns:
        Parsed point

    Raises:
        DataValidationError: If a column is missing or a cell cannot be parsed
    """
    for column in REQUIRED_COLUMNS:
        if column not in row or row[column] is None or str(row[column]).strip() == "":
            raise DataValidationError(
                f"Row {row_number}: missing '{column}'",
                field=column,
                row=row_number,
            )

    raw_date = str(row["date"]).strip()
    raw_close = str(row["close"]).strip()

    try:
        parsed_date = datetime.strptime(raw_date, date_format).date()
    except ValueError as e:
        raise DataValidationError(
            f"Row {row_number}: unparseable date {raw_date!r}",
            field="date",
            value=raw_date,
            row=row_number,
        ) from e

    try:
        close = float(raw_close)
    except ValueError as e:
        raise DataValidationError(
            f"Row {row_number}: non-numeric close {raw_close!r}",
            field="close",
            value=raw_close,
            row=row_number,
        ) from e

    if not math.isfinite(close) or close < 0:
        raise DataValidationError(
            f"Row {row_number}: close must be a non-negative finite number, got {raw_close!r}",
            field="close",
            value=raw_close,
            row=row_number,
        )

    try:
        return TimeSeriesPoint(date=parsed_date, close=close)
    except ValidationError as e:
        raise DataValidationError(
            f"Row {row_number}: {e.errors()[0]['msg']}",
            row=row_number,
        ) from e


def prepare_series(
    rows: list[dict[str, Any]],
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> SeriesLoadResult:
    """Convert raw rows into the closing price series.

    Rows that fail to parse, or whose date is not strictly after the
    previous valid row, are excluded and counted in skipped_rows.

    Args:
        rows: Raw rows from load_table
        date_format: strptime format of the date column

    Returns:
        SeriesLoadResult with points and statistics
    """
    start_time = time.perf_counter()
    result = SeriesLoadResult(total_rows=len(rows))

    for row_number, row in enumerate(rows, start=1):
        try:
            point = parse_row(row, row_number=row_number, date_format=date_format)
            if result.points and point.date <= result.points[-1].date:
                raise DataValidationError(
                    f"Row {row_number}: date {point.date.isoformat()} is not after "
                    f"{result.points[-1].date.isoformat()}",
                    field="date",
                    value=point.date.isoformat(),
                    row=row_number,
                )
        except DataValidationError as e:
            logger.warning(f"Skipping row: {e.message}")
            result.errors.append(e.message)
            result.skipped_rows += 1
            continue

        result.points.append(point)

    result.load_duration_ms = (time.perf_counter() - start_time) * 1000

    logger.info(
        f"Prepared {result.valid_rows} points from {result.total_rows} rows "
        f"({result.skipped_rows} skipped) in {result.load_duration_ms:.1f}ms"
    )

    return result


def load_series(
    path: str | Path,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> SeriesLoadResult:
    """Load and prepare the closing price series from a CSV file.

    Args:
        path: Path to the CSV file
        date_format: strptime format of the date column

    Returns:
        SeriesLoadResult with at least one point

    Raises:
        DataLoadError: If the file can't be read or no row is usable
    """
    rows = load_table(path)
    result = prepare_series(rows, date_format=date_format)

    if not result.points:
        raise DataLoadError(
            f"No valid rows in {path} ({result.skipped_rows} of {result.total_rows} skipped)",
            path=str(path),
            context={"skipped_rows": result.skipped_rows, "total_rows": result.total_rows},
        )

    return result
