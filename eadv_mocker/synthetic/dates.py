"""Observation date sampling, formatting and parsing.

Three distribution modes are supported:

``uniform``
    One observation per equal-width segment of the interval, jittered within
    the first 80% of its segment.
``recent-weighted``
    Inverse power transform ``u ** (1 / lambda)`` that concentrates
    observations toward the end of the interval.
``clustered``
    Observations grouped into one to three episodes with Gaussian spread
    around randomly placed centres.

Whatever the mode, :func:`generate_dates` returns dates most recent first so
that ``last()``/``first()`` style consumers can rely on the ordering.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import List

from .random_source import SeededRandom

UNIFORM_JITTER_FACTOR = 0.8
RECENCY_LAMBDA = 2.5
CLUSTER_EDGE_MARGIN = 0.1
CLUSTER_SPREAD_FACTOR = 0.05
MAX_CLUSTERS = 3

_ORACLE_MONTHS = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)


class DateDistribution(str, Enum):
    """Supported ways of spreading observation dates across an interval."""

    UNIFORM = "uniform"
    RECENT_WEIGHTED = "recent-weighted"
    CLUSTERED = "clustered"


class DateFormat(str, Enum):
    """Textual date conventions for the ``dt`` column."""

    ISO = "iso"
    ORACLE = "oracle"
    MSSQL = "mssql"


def _coerce_distribution(distribution: DateDistribution | str) -> DateDistribution:
    try:
        return DateDistribution(distribution)
    except ValueError:
        supported = ", ".join(item.value for item in DateDistribution)
        raise ValueError(
            f"unsupported date distribution {distribution!r}; expected one of {supported}"
        ) from None


def generate_dates(
    count: int,
    start: datetime,
    end: datetime,
    rng: SeededRandom,
    distribution: DateDistribution | str = DateDistribution.UNIFORM,
) -> List[datetime]:
    """Generate ``count`` dates within ``[start, end]``, most recent first.

    Parameters
    ----------
    count:
        Number of dates to draw. Zero or negative counts yield an empty list.
    start, end:
        Inclusive interval bounds. ``start == end`` is valid and yields dates
        equal to ``start``.
    rng:
        Seeded random source; the number of draws consumed depends on the
        mode (``count`` for uniform and recent-weighted; clusters plus at
        least ``3 * count`` for clustered).
    distribution:
        One of :class:`DateDistribution` (or its string value).
    """

    mode = _coerce_distribution(distribution)
    if start > end:
        raise ValueError("start date must be <= end date")
    if count <= 0:
        return []

    if mode is DateDistribution.RECENT_WEIGHTED:
        dates = _recent_weighted_dates(count, start, end, rng)
    elif mode is DateDistribution.CLUSTERED:
        dates = _clustered_dates(count, start, end, rng)
    else:
        dates = _uniform_dates(count, start, end, rng)

    dates.sort(reverse=True)
    return dates


def _uniform_dates(
    count: int, start: datetime, end: datetime, rng: SeededRandom
) -> List[datetime]:
    width = end - start
    if count == 1:
        return [start + width * rng.random()]

    segment = width / count
    out: List[datetime] = []
    for i in range(count):
        jitter = segment * (rng.random() * UNIFORM_JITTER_FACTOR)
        # microsecond rounding of tiny segments must not overshoot ``end``
        out.append(min(end, start + segment * i + jitter))
    return out


def _recent_weighted_dates(
    count: int, start: datetime, end: datetime, rng: SeededRandom
) -> List[datetime]:
    width = end - start
    out: List[datetime] = []
    for _ in range(count):
        # u ** (1 / lambda) pushes mass toward 1, i.e. toward ``end``
        weighted = rng.random() ** (1 / RECENCY_LAMBDA)
        out.append(start + width * weighted)
    return out


def _clustered_dates(
    count: int, start: datetime, end: datetime, rng: SeededRandom
) -> List[datetime]:
    width = end - start
    num_clusters = min(MAX_CLUSTERS, max(1, math.ceil(count / 3)))

    margin = width * CLUSTER_EDGE_MARGIN
    inner = width - 2 * margin
    centers = [start + margin + inner * rng.random() for _ in range(num_clusters)]

    spread = width * CLUSTER_SPREAD_FACTOR
    out: List[datetime] = []
    for _ in range(count):
        center = centers[math.floor(rng.random() * num_clusters)]
        instant = center + spread * _gaussian(rng)
        out.append(max(start, min(end, instant)))
    return out


def _gaussian(rng: SeededRandom) -> float:
    """Standard normal deviate via Box-Muller; draws ``u1`` then ``u2``."""

    u1 = rng.random()
    u2 = rng.random()
    while u1 == 0:
        u1 = rng.random()
    return math.sqrt(-2 * math.log(u1)) * math.cos(2 * math.pi * u2)


def format_date(value: datetime, fmt: DateFormat | str = DateFormat.ISO) -> str:
    """Render ``value`` in one of the supported database conventions."""

    try:
        date_format = DateFormat(fmt)
    except ValueError:
        raise ValueError(f"unsupported date format {fmt!r}") from None

    if date_format is DateFormat.ISO:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if date_format is DateFormat.ORACLE:
        return f"{value.day:02d}-{_ORACLE_MONTHS[value.month - 1]}-{value.year:04d}"
    return value.strftime("%Y-%m-%d %H:%M:%S")


def parse_date(value: datetime | date | str) -> datetime:
    """Coerce a datetime, date or ISO 8601 string into a datetime."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    raise TypeError(f"cannot interpret {value!r} as a date")


def default_date_range(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the default observation window: one year ago through now (UTC)."""

    end = now or datetime.now(timezone.utc)
    return end - timedelta(days=365), end
