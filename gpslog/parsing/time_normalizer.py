"""
Timestamp format inference.

A GPS log's time column may hold calendar strings, epoch milliseconds,
epoch seconds, or GPS time in seconds or milliseconds. Given one sample we
try each interpretation in a fixed order and keep the first that lands in a
plausible year. The chosen interpretation is then applied to every value
from the same file.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from numbers import Real
from typing import Any, Callable, List, Optional
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

from ..config import MIN_YEAR
from ..exceptions import TimeFormatUnresolvedError
from ..logger import setup_logger
from .gps_time import gps_to_unix_ms

logger = setup_logger(__name__)

# Anything that might turn up in a time column
Timeish = Any

# Failures that mean "not this interpretation"
CONVERSION_ERRORS = (ValueError, TypeError, OverflowError, ArithmeticError)

# Basic ISO 8601 calendar date, e.g. 20140706
COMPACT_DATE_RE = re.compile(r"\d{8}")


def _to_number(value: Timeish) -> float:
    """Coerce a raw time value to a finite float."""
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"Not a numeric time: {value!r}")
    if isinstance(value, (Real, np.number)):
        number = float(value)
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise TypeError(f"Not a numeric time: {value!r}")

    if not math.isfinite(number):
        raise ValueError(f"Not a finite time: {value!r}")
    return number


def _is_numeric(value: Timeish) -> bool:
    try:
        _to_number(value)
    except CONVERSION_ERRORS:
        return False
    return True


def _calendar_to_unix_ms(value: Timeish, timezone: Optional[str]) -> float:
    """
    Parse a calendar date/time string or date object.

    Naive times are read in ``timezone``, or in local time when it is None.
    Around DST changes, a repeated wall time resolves to its first (summer
    time) occurrence, and a skipped one is read with the offset in force
    before the gap, so 02:30 on a spring-forward night becomes 03:30.
    Compact ISO dates ("20140706") are calendar dates, not numbers.
    """
    if isinstance(value, str) and COMPACT_DATE_RE.fullmatch(value.strip()):
        ts = pd.to_datetime(value.strip(), format="%Y%m%d")
    elif _is_numeric(value) or not isinstance(value, (str, datetime, date, np.datetime64)):
        raise TypeError(f"Not a calendar time: {value!r}")
    else:
        ts = pd.Timestamp(value.strip() if isinstance(value, str) else value)

    if pd.isna(ts):
        raise ValueError(f"Empty calendar time: {value!r}")

    if ts.tzinfo is None:
        wall = ts.to_pydatetime(warn=False)
        if timezone is not None:
            # fold=0 picks the first of two repeated wall times
            wall = wall.replace(tzinfo=ZoneInfo(timezone), fold=0)
        return wall.timestamp() * 1000

    return ts.value / 1_000_000


@dataclass(frozen=True)
class TimeHypothesis:
    """One candidate interpretation of raw time values."""
    name: str
    to_unix_ms: Callable[[Timeish], float]

    def convert(self, value: Timeish) -> int:
        """Convert a raw value to integer Unix ms (may raise)."""
        return int(round(self.to_unix_ms(value)))


@dataclass(frozen=True)
class HypothesisResult:
    """Outcome of probing one hypothesis against a sample."""
    hypothesis: TimeHypothesis
    unix_ms: Optional[int] = None
    year: Optional[int] = None

    @property
    def parsed(self) -> bool:
        return self.year is not None


def build_hypotheses(timezone: Optional[str] = None) -> List[TimeHypothesis]:
    """The interpretations to try, in priority order."""
    return [
        TimeHypothesis("calendar", lambda t: _calendar_to_unix_ms(t, timezone)),
        TimeHypothesis("numeric date", _to_number),
        TimeHypothesis("unix seconds", lambda t: _to_number(t) * 1000),
        TimeHypothesis("gps milliseconds", lambda t: gps_to_unix_ms(_to_number(t))),
        TimeHypothesis("gps seconds", lambda t: gps_to_unix_ms(_to_number(t) * 1000)),
    ]


def probe(hypothesis: TimeHypothesis, sample: Timeish) -> HypothesisResult:
    """Try a hypothesis on a sample; parse failures give an unparsed result."""
    try:
        unix_ms = hypothesis.convert(sample)
        year = pd.Timestamp(unix_ms, unit="ms").year
    except CONVERSION_ERRORS:
        return HypothesisResult(hypothesis)
    return HypothesisResult(hypothesis, unix_ms=unix_ms, year=year)


class TimeNormalizer:
    """
    Converts raw time values to Unix ms using one locked-in hypothesis.

    Create with ``time_normalizer()``; call it on each raw value.
    """

    def __init__(self, hypothesis: TimeHypothesis, sample: Timeish):
        self._hypothesis = hypothesis
        self._sample = sample

    @property
    def hypothesis(self) -> str:
        return self._hypothesis.name

    @property
    def sample(self) -> Timeish:
        return self._sample

    def __call__(self, value: Timeish) -> int:
        return self._hypothesis.convert(value)

    def __repr__(self) -> str:
        return f"TimeNormalizer({self.hypothesis!r}, sample={self._sample!r})"


def time_normalizer(
    sample: Timeish,
    year: Optional[int] = None,
    *,
    min_year: int = MIN_YEAR,
    max_year: Optional[int] = None,
    timezone: Optional[str] = None,
) -> TimeNormalizer:
    """
    Work out how a source encodes time from one sample.

    Hypotheses are tried in order: calendar literal, numeric date (epoch ms),
    Unix seconds, GPS milliseconds, GPS seconds. The first whose year equals
    ``year`` (when given) or falls in ``[min_year, max_year]`` is used.

    Args:
        sample: A raw time value from the source
        year: Year the data is known to be from, if any
        min_year: Lowest plausible year
        max_year: Highest plausible year (None = unbounded)
        timezone: Zone for naive calendar times (None = local time)

    Returns:
        TimeNormalizer applying the accepted hypothesis

    Raises:
        TimeFormatUnresolvedError: If no hypothesis is accepted
    """
    def plausible(result: HypothesisResult) -> bool:
        if not result.parsed:
            return False
        if year:
            return result.year == year
        return result.year >= min_year and (max_year is None or result.year <= max_year)

    for hypothesis in build_hypotheses(timezone):
        result = probe(hypothesis, sample)
        if plausible(result):
            logger.debug(f"Time {sample!r} looks like {hypothesis.name} (year {result.year})")
            return TimeNormalizer(hypothesis, sample)

    raise TimeFormatUnresolvedError(sample)
