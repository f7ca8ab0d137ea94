from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from eadv_mocker.mocker import MockDataResult


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""


def check_dates_within_range(
    dates: Sequence[datetime], start: datetime, end: datetime
) -> ValidationResult:
    for idx, dt in enumerate(dates):
        if dt < start or dt > end:
            return ValidationResult(
                False, f"date {dt.isoformat()} at index {idx} outside [{start}, {end}]"
            )
    return ValidationResult(True, f"all {len(dates)} dates within range")


def check_descending_order(dates: Sequence[datetime]) -> ValidationResult:
    for idx in range(1, len(dates)):
        if dates[idx - 1] < dates[idx]:
            return ValidationResult(
                False, f"dates not in descending order at index {idx}"
            )
    return ValidationResult(True, "dates are most recent first")


def check_recency_bias(
    dates: Sequence[datetime],
    start: datetime,
    end: datetime,
    *,
    min_later_half_share: float = 0.6,
) -> ValidationResult:
    """Validate that enough dates fall in the later half of the interval.

    Parameters
    ----------
    dates:
        Generated dates.
    start, end:
        Interval the dates were drawn from.
    min_later_half_share:
        Minimum fraction of dates expected at or after the midpoint.
    """
    if not dates:
        return ValidationResult(False, "no dates to assess recency bias")

    midpoint = start + (end - start) / 2
    later = sum(1 for dt in dates if dt >= midpoint)
    share = later / len(dates)
    if share < min_later_half_share:
        return ValidationResult(
            False,
            f"recency bias too weak: {share:.1%} in later half < {min_later_half_share:.1%}",
        )
    return ValidationResult(True, f"recency bias detected: {share:.1%} in later half")


def check_clustering_structure(dates: Sequence[datetime]) -> ValidationResult:
    """Validate that consecutive gaps mix tight clusters and wide separations.

    Clustered data shows at least one gap below half the median gap (within
    an episode) and one above twice the median gap (between episodes).

    Returns
    -------
    ValidationResult
        Validation result with gap statistics.
    """
    if len(dates) < 3:
        return ValidationResult(False, "need at least 3 dates to assess clustering")

    times = np.sort(np.array([dt.timestamp() for dt in dates], dtype=float))
    gaps = np.diff(times)
    # upper median, as in a sorted-list lookup at len // 2
    median_gap = float(np.sort(gaps)[len(gaps) // 2])
    small = int(np.sum(gaps < median_gap * 0.5))
    large = int(np.sum(gaps > median_gap * 2))

    if small == 0 or large == 0:
        return ValidationResult(
            False,
            f"no cluster structure: {small} small gaps, {large} large gaps",
        )
    return ValidationResult(
        True, f"clusters detected: {small} small gaps, {large} large gaps"
    )


def check_eadv_row_count(
    result: "MockDataResult", observations_per_entity: int
) -> ValidationResult:
    expected = (
        len(result.metadata.entities)
        * len(result.metadata.attributes)
        * observations_per_entity
    )
    actual = len(result.eadv)
    if actual != expected or result.metadata.total_rows != actual:
        return ValidationResult(
            False,
            f"expected {expected} EADV rows, found {actual} "
            f"(metadata reports {result.metadata.total_rows})",
        )
    return ValidationResult(True, f"EADV row count ok: {actual}")


def check_rout_tables_complete(result: "MockDataResult") -> ValidationResult:
    """Validate one row per entity per ``rout_*`` table with consistent columns."""
    entities = list(result.metadata.entities)
    for table, rows in result.rout_tables.items():
        if [row.eid for row in rows] != entities:
            return ValidationResult(False, f"{table} rows do not match entities")
        columns: dict[tuple[str, ...], int] = defaultdict(int)
        for row in rows:
            columns[tuple(row.values)] += 1
        if len(columns) > 1:
            return ValidationResult(False, f"{table} rows have inconsistent variables")
    return ValidationResult(
        True, f"{len(result.rout_tables)} rout tables complete for {len(entities)} entities"
    )


def check_entity_ids_sequential(entities: Sequence[int]) -> ValidationResult:
    for idx in range(1, len(entities)):
        if entities[idx] != entities[idx - 1] + 1:
            return ValidationResult(False, f"entity ids not consecutive at index {idx}")
    return ValidationResult(True, f"{len(entities)} consecutive entity ids")
