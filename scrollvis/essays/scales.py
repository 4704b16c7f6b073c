"""
Scales mapping data domains to pixel ranges.

Tick generation, domain nicing and band layout follow the d3-scale
algorithms so that axis ticks and bar slots match the published chart
exactly. All scales are plain value objects; a scale only changes when
its domain is explicitly reset.
"""

import math
from bisect import bisect_left
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Sequence

import numpy as np

E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

# Fixed ceiling of the revenue axis (millions of USD). Not derived from data.
BAR_VALUE_DOMAIN: tuple[float, float] = (0.0, 160000.0)

SI_PREFIXES = ["y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DAY_MS = 86_400_000


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


def js_round(x: float) -> int:
    """Round half up, like JavaScript's Math.round."""
    return int(math.floor(x + 0.5))


def extent(values: Iterable[float]) -> tuple[float, float]:
    """Minimum and maximum of the values."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        raise ValueError("extent of an empty sequence")
    return float(np.min(arr)), float(np.max(arr))


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1

    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = js_round(start * inc)
        i2 = js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = js_round(start / inc)
        i2 = js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Tick step as d3's tickIncrement: positive step, or negative inverse step below 1."""
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1
    if power >= 0:
        return factor * math.pow(10, power)
    return -math.pow(10, -power) / factor


def tick_step(start: float, stop: float, count: float) -> float:
    """Absolute tick step between start and stop."""
    reverse = stop < start
    inc = tick_increment(stop, start, count) if reverse else tick_increment(start, stop, count)
    step = -1 / inc if inc < 0 else inc
    return -step if reverse else step


def ticks(start: float, stop: float, count: float) -> list[float]:
    """Uniformly spaced, human-friendly values between start and stop."""
    if count <= 0:
        return []
    if start == stop:
        return [start]

    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []

    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(n)]
    else:
        values = [(i1 + i) * inc for i in range(n)]
    return values[::-1] if reverse else values


def nice_domain(start: float, stop: float, count: int = 10) -> tuple[float, float]:
    """Extend a domain so it starts and ends on round tick values."""
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    prestep = None
    for _ in range(10):
        if start == stop:
            break
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step

    return (stop, start) if reverse else (start, stop)


# =============================================================================
# TICK FORMATTING
# =============================================================================


def _exponent(x: float) -> int:
    return math.floor(math.log10(abs(x))) if x else 0


def precision_prefix(step: float, value: float) -> int:
    """Decimal places needed for SI-prefixed ticks of the given step."""
    prefix_exp = max(-8, min(8, _exponent(value) // 3)) * 3
    return max(0, prefix_exp - _exponent(step))


def format_si_currency(values: Sequence[float], start: float, stop: float, count: int) -> list[str]:
    """Format tick values with a shared SI prefix and a dollar sign ('$,s').

    The prefix comes from the largest domain magnitude and the precision
    from the tick step, so all labels of an axis share one unit.
    """
    value = max(abs(start), abs(stop))
    step = abs(tick_step(start, stop, count)) if start != stop else abs(value) or 1
    precision = precision_prefix(step, value)
    prefix_exp = max(-8, min(8, _exponent(value) // 3)) * 3
    prefix = SI_PREFIXES[8 + prefix_exp // 3]
    k = math.pow(10, -prefix_exp)

    labels = []
    for v in values:
        scaled = v * k
        sign = "-" if scaled < 0 else ""
        labels.append(f"{sign}${abs(scaled):,.{precision}f}{prefix}")
    return labels


# =============================================================================
# SCALES
# =============================================================================


class LinearScale:
    """Continuous linear mapping from a numeric domain to a pixel range."""

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range_: Sequence[float] = (0.0, 1.0),
        *,
        round_output: bool = False,
    ):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))
        self.round_output = round_output

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = 0.5 if d0 == d1 else (float(value) - d0) / (d1 - d0)
        out = r0 + t * (r1 - r0)
        return js_round(out) if self.round_output else out

    def map_many(self, values: Iterable[float]) -> np.ndarray:
        """Vectorized mapping of many values."""
        arr = np.asarray(list(values), dtype=float)
        d0, d1 = self.domain
        r0, r1 = self.range
        t = np.full_like(arr, 0.5) if d0 == d1 else (arr - d0) / (d1 - d0)
        out = r0 + t * (r1 - r0)
        return np.floor(out + 0.5) if self.round_output else out

    def invert(self, pixel: float) -> float:
        r0, r1 = self.range
        d0, d1 = self.domain
        t = 0.5 if r0 == r1 else (float(pixel) - r0) / (r1 - r0)
        return d0 + t * (d1 - d0)

    def nice(self, count: int = 10) -> "LinearScale":
        """Extend the domain to round values. Returns self."""
        self.domain = nice_domain(self.domain[0], self.domain[1], count)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, count: int = 10) -> list[str]:
        """Labels for ticks(count) in '$,s' style."""
        values = self.ticks(count)
        return format_si_currency(values, self.domain[0], self.domain[1], count)

    def copy(self) -> "LinearScale":
        return LinearScale(self.domain, self.range, round_output=self.round_output)


def _to_ms(value: date | datetime) -> float:
    if isinstance(value, datetime):
        dt_value = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        dt_value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return (dt_value - _EPOCH).total_seconds() * 1000


def _from_ms(ms: float) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


# (name, approximate duration in ms) ordered by duration
TIME_INTERVALS: list[tuple[str, float]] = [
    ("day", _DAY_MS),
    ("2 days", 2 * _DAY_MS),
    ("week", 7 * _DAY_MS),
    ("month", 30 * _DAY_MS),
    ("3 months", 3 * 30 * _DAY_MS),
    ("year", 365 * _DAY_MS),
]


class TimeScale:
    """Linear mapping from calendar dates to a pixel range."""

    def __init__(
        self,
        domain: Sequence[date | datetime] = (date(2000, 1, 1), date(2000, 1, 2)),
        range_: Sequence[float] = (0.0, 1.0),
        *,
        round_output: bool = False,
    ):
        self._linear = LinearScale((0.0, 1.0), range_, round_output=round_output)
        self.domain = (domain[0], domain[1])

    @property
    def domain(self) -> tuple[date | datetime, date | datetime]:
        return self._domain

    @domain.setter
    def domain(self, value: Sequence[date | datetime]) -> None:
        self._domain = (value[0], value[1])
        self._linear.domain = (_to_ms(value[0]), _to_ms(value[1]))

    @property
    def range(self) -> tuple[float, float]:
        return self._linear.range

    def __call__(self, value: date | datetime) -> float:
        return self._linear(_to_ms(value))

    def map_many(self, values: Iterable[date | datetime]) -> np.ndarray:
        return self._linear.map_many(_to_ms(v) for v in values)

    def invert(self, pixel: float) -> datetime:
        return _from_ms(self._linear.invert(pixel))

    def tick_interval(self, count: int = 10) -> str:
        """Calendar interval whose spacing is closest to the requested count."""
        d0, d1 = self._linear.domain
        target = abs(d1 - d0) / max(1, count)
        durations = [duration for _, duration in TIME_INTERVALS]
        i = bisect_left(durations, target)
        if i == 0:
            return TIME_INTERVALS[0][0]
        if i == len(TIME_INTERVALS):
            return TIME_INTERVALS[-1][0]
        before, after = TIME_INTERVALS[i - 1], TIME_INTERVALS[i]
        return before[0] if target / before[1] < after[1] / target else after[0]

    def ticks(self, count: int = 10) -> list[date]:
        """Calendar-aligned tick dates within the domain."""
        start, stop = sorted(
            (_from_ms(self._linear.domain[0]).date(), _from_ms(self._linear.domain[1]).date())
        )
        interval = self.tick_interval(count)

        if interval == "year":
            years = max(1, round(tick_step(start.year, stop.year + 1, count))) if stop.year > start.year else 1
            first = start.year if start == date(start.year, 1, 1) else start.year + 1
            first += (-first) % years
            return [date(y, 1, 1) for y in range(first, stop.year + 1, years)]

        if interval in ("month", "3 months"):
            months = 3 if interval == "3 months" else 1
            y, m = start.year, start.month
            if start.day != 1:
                m += 1
            result = []
            while True:
                y += (m - 1) // 12
                m = (m - 1) % 12 + 1
                if (m - 1) % months:
                    m += 1
                    continue
                current = date(y, m, 1)
                if current > stop:
                    break
                result.append(current)
                m += months
            return result

        days = {"day": 1, "2 days": 2, "week": 7}[interval]
        current = start
        if interval == "week":
            # Weeks start on Sunday
            current += timedelta(days=(6 - current.weekday()) % 7)
        result = []
        while current <= stop:
            result.append(current)
            current += timedelta(days=days)
        return result

    def tick_format(self, count: int = 10) -> list[str]:
        """Multi-scale labels: years, month names, or day labels."""
        labels = []
        for tick in self.ticks(count):
            if tick.month == 1 and tick.day == 1:
                labels.append(f"{tick.year}")
            elif tick.day == 1:
                labels.append(tick.strftime("%B"))
            else:
                labels.append(tick.strftime("%b %d"))
        return labels


class BandScale:
    """Discrete categories laid out as equal-width bands across a range."""

    def __init__(
        self,
        domain: Sequence[str] = (),
        range_: Sequence[float] = (0.0, 1.0),
        *,
        padding: float = 0.0,
        round_output: bool = True,
        align: float = 0.5,
    ):
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = padding
        self.round_output = round_output
        self.align = align
        self._rescale()

    def _rescale(self) -> None:
        n = len(self.domain)
        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        padding_inner = padding_outer = self.padding

        step = (stop - start) / max(1, n - padding_inner + padding_outer * 2)
        if self.round_output:
            step = math.floor(step)
        start += (stop - start - step * (n - padding_inner)) * self.align
        bandwidth = step * (1 - padding_inner)
        if self.round_output:
            start = js_round(start)
            bandwidth = js_round(bandwidth)

        positions = [start + step * i for i in range(n)]
        if reverse:
            positions.reverse()

        self.step = step
        self.bandwidth = bandwidth
        self._index = {name: positions[i] for i, name in enumerate(self.domain)}

    def __call__(self, value: str) -> float:
        """Left edge of the value's band."""
        if value not in self._index:
            raise KeyError(f"Unknown category: {value!r}")
        return self._index[value]

    def __contains__(self, value: str) -> bool:
        return value in self._index

    def ticks(self) -> list[str]:
        return list(self.domain)
