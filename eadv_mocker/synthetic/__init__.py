"""Synthetic EADV data generation and validation utilities.

This package produces realistic-but-fake clinical observation tables to
exercise rule evaluation pipelines without accessing patient data.
"""

from .dates import DateDistribution, DateFormat, format_date, generate_dates, parse_date
from .generator import (
    DateRange,
    EadvRow,
    MockerOptions,
    ResolvedMockerOptions,
    RoutRow,
    generate_eadv_rows,
    generate_entity_ids,
    generate_rout_tables,
    resolve_options,
)
from .random_source import SeededRandom, random_float, random_int, random_pick
from .scenarios import (
    BASELINE_SCENARIO,
    CHRONIC_MONITORING_SCENARIO,
    EPISODIC_ADMISSION_SCENARIO,
    LARGE_COHORT_SCENARIO,
    SPARSE_HISTORY_SCENARIO,
    get_scenario,
)
from .validation import (
    ValidationResult,
    check_clustering_structure,
    check_dates_within_range,
    check_descending_order,
    check_eadv_row_count,
    check_entity_ids_sequential,
    check_recency_bias,
    check_rout_tables_complete,
)
from .values import (
    CLINICAL_VALUE_GENERATORS,
    create_discrete_generator,
    create_nullable_generator,
    create_range_generator,
    default_value_generator,
)

__all__ = [
    "DateDistribution",
    "DateFormat",
    "format_date",
    "generate_dates",
    "parse_date",
    "DateRange",
    "EadvRow",
    "MockerOptions",
    "ResolvedMockerOptions",
    "RoutRow",
    "generate_eadv_rows",
    "generate_entity_ids",
    "generate_rout_tables",
    "resolve_options",
    "SeededRandom",
    "random_float",
    "random_int",
    "random_pick",
    "BASELINE_SCENARIO",
    "CHRONIC_MONITORING_SCENARIO",
    "EPISODIC_ADMISSION_SCENARIO",
    "LARGE_COHORT_SCENARIO",
    "SPARSE_HISTORY_SCENARIO",
    "get_scenario",
    "ValidationResult",
    "check_clustering_structure",
    "check_dates_within_range",
    "check_descending_order",
    "check_eadv_row_count",
    "check_entity_ids_sequential",
    "check_recency_bias",
    "check_rout_tables_complete",
    "CLINICAL_VALUE_GENERATORS",
    "create_discrete_generator",
    "create_nullable_generator",
    "create_range_generator",
    "default_value_generator",
]
