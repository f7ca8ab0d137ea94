from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from eadv_mocker.foundation.dependencies import expand_wildcard_attribute

from .dates import (
    DateDistribution,
    DateFormat,
    default_date_range,
    format_date,
    generate_dates,
    parse_date,
)
from .random_source import SeededRandom
from .values import Value, ValueGenerator, default_value_generator

DateLike = Union[datetime, date, str]


@dataclass(frozen=True)
class EadvRow:
    eid: int
    att: str
    dt: str
    val: Value


@dataclass(frozen=True)
class RoutRow:
    """One entity's row in a ``rout_*`` table."""

    eid: int
    values: Mapping[str, Value] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Value]:
        return {"eid": self.eid, **self.values}


@dataclass(frozen=True)
class DateRange:
    """Inclusive observation window; strings and dates are parsed on creation.

    When exactly one end carries a timezone, the naive end is read as UTC.
    """

    start: DateLike
    end: DateLike

    def __post_init__(self) -> None:
        start = parse_date(self.start)
        end = parse_date(self.end)
        if (start.tzinfo is None) != (end.tzinfo is None):
            if start.tzinfo is None:
                start = start.replace(tzinfo=timezone.utc)
            else:
                end = end.replace(tzinfo=timezone.utc)
        if start > end:
            raise ValueError("date_range start must be <= end")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)


@dataclass(frozen=True)
class MockerOptions:
    """Configuration for mock EADV generation.

    Attributes
    ----------
    entity_count: Number of entities (patients) to generate.
    entity_id_start: First entity id; ids are consecutive from here.
    observations_per_entity: Dates drawn per entity per attribute.
    date_range: Observation window; defaults to the last 365 days.
    date_format: Rendering of the ``dt`` column (iso, oracle or mssql).
    date_distribution: How dates spread across the window.
    value_generators: Per-attribute generator overrides. Expanded wildcard
        attributes also fall back to the override of their pattern.
    default_value_generator: Generator for attributes without an override.
    include_mock_bind_tables: Whether to generate ``rout_*`` tables.
    bind_table_values: ``{table: {variable: generator}}`` overrides for
        ``rout_*`` values; other variables get a 0/1 flag.
    seed: PRNG seed; defaults to the current time in milliseconds, which is
        not reproducible.
    """

    entity_count: int = 3
    entity_id_start: int = 1001
    observations_per_entity: int = 3
    date_range: Optional[DateRange] = None
    date_format: DateFormat = DateFormat.ISO
    date_distribution: DateDistribution = DateDistribution.UNIFORM
    value_generators: Mapping[str, ValueGenerator] = field(default_factory=dict)
    default_value_generator: Optional[ValueGenerator] = None
    include_mock_bind_tables: bool = True
    bind_table_values: Mapping[str, Mapping[str, ValueGenerator]] = field(
        default_factory=dict
    )
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.entity_count < 0:
            raise ValueError("entity_count must be >= 0")
        if self.observations_per_entity < 0:
            raise ValueError("observations_per_entity must be >= 0")
        try:
            object.__setattr__(self, "date_format", DateFormat(self.date_format))
        except ValueError:
            raise ValueError(f"unsupported date_format {self.date_format!r}") from None
        try:
            object.__setattr__(
                self, "date_distribution", DateDistribution(self.date_distribution)
            )
        except ValueError:
            raise ValueError(
                f"unsupported date_distribution {self.date_distribution!r}"
            ) from None


@dataclass(frozen=True)
class ResolvedMockerOptions:
    """:class:`MockerOptions` with every default applied."""

    entity_count: int
    entity_id_start: int
    observations_per_entity: int
    start: datetime
    end: datetime
    date_format: DateFormat
    date_distribution: DateDistribution
    value_generators: Mapping[str, ValueGenerator]
    default_value_generator: ValueGenerator
    include_mock_bind_tables: bool
    bind_table_values: Mapping[str, Mapping[str, ValueGenerator]]
    seed: int


def resolve_options(
    options: Optional[MockerOptions] = None, *, now: Optional[datetime] = None
) -> ResolvedMockerOptions:
    """Apply defaults; ``now`` anchors the default date range."""

    options = options or MockerOptions()
    if options.date_range is not None:
        start, end = options.date_range.start, options.date_range.end
    else:
        start, end = default_date_range(now)
    seed = options.seed if options.seed is not None else int(time.time() * 1000)

    return ResolvedMockerOptions(
        entity_count=options.entity_count,
        entity_id_start=options.entity_id_start,
        observations_per_entity=options.observations_per_entity,
        start=start,
        end=end,
        date_format=options.date_format,
        date_distribution=options.date_distribution,
        value_generators=dict(options.value_generators),
        default_value_generator=options.default_value_generator
        or default_value_generator,
        include_mock_bind_tables=options.include_mock_bind_tables,
        bind_table_values={
            table: dict(variables)
            for table, variables in options.bind_table_values.items()
        },
        seed=seed,
    )


def generate_entity_ids(count: int, start_id: int) -> List[int]:
    """Consecutive entity ids ``start_id .. start_id + count - 1``."""

    return list(range(start_id, start_id + max(0, count)))


def generate_eadv_rows(
    attributes: Iterable[str],
    entities: Sequence[int],
    options: ResolvedMockerOptions,
    rng: SeededRandom,
) -> List[EadvRow]:
    """Generate EADV rows for every entity x attribute x observation date.

    Wildcard attributes are expanded once, before the entity loop, so every
    entity shares the same attribute columns. Draw order: wildcard suffixes,
    then per entity and attribute the dates followed by one value per date.
    """

    patterns = list(attributes)
    columns = [(expand_wildcard_attribute(att, rng), att) for att in patterns]

    rows: List[EadvRow] = []
    for eid in entities:
        for att, pattern in columns:
            dates = generate_dates(
                options.observations_per_entity,
                options.start,
                options.end,
                rng,
                options.date_distribution,
            )
            value_gen = (
                options.value_generators.get(att)
                or options.value_generators.get(pattern)
                or options.default_value_generator
            )
            for dt in dates:
                rows.append(
                    EadvRow(
                        eid=eid,
                        att=att,
                        dt=format_date(dt, options.date_format),
                        val=value_gen(rng),
                    )
                )
    return rows


def generate_rout_tables(
    bind_dependencies: Mapping[str, Iterable[str]],
    entities: Sequence[int],
    options: ResolvedMockerOptions,
    rng: SeededRandom,
) -> Dict[str, List[RoutRow]]:
    """Generate one row per entity for every ``rout_*`` table.

    Variables without a configured generator get a binary flag
    (``1`` when the draw exceeds 0.5).
    """

    tables: Dict[str, List[RoutRow]] = {}
    for table_name, variables in bind_dependencies.items():
        overrides = options.bind_table_values.get(table_name, {})
        variable_names = list(variables)
        table_rows: List[RoutRow] = []
        for eid in entities:
            values: Dict[str, Value] = {}
            for var_name in variable_names:
                custom = overrides.get(var_name)
                if custom is not None:
                    values[var_name] = custom(rng)
                else:
                    values[var_name] = 1 if rng.random() > 0.5 else 0
            table_rows.append(RoutRow(eid=eid, values=values))
        tables[table_name] = table_rows
    return tables
