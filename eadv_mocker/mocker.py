"""Top-level mock data generation from parsed ruleblocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from eadv_mocker.foundation.dependencies import extract_dependencies
from eadv_mocker.foundation.rule_contract import Ruleblock
from eadv_mocker.synthetic.generator import (
    EadvRow,
    MockerOptions,
    RoutRow,
    generate_eadv_rows,
    generate_entity_ids,
    generate_rout_tables,
    resolve_options,
)
from eadv_mocker.synthetic.random_source import SeededRandom

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockMetadata:
    """Summary of what a generation call produced."""

    entities: List[int]
    attributes: List[str]
    bind_dependencies: List[str]
    total_rows: int
    seed: int


@dataclass
class MockDataResult:
    """Container for the EADV rows, ``rout_*`` tables and metadata."""

    eadv: List[EadvRow]
    metadata: MockMetadata
    rout_tables: Dict[str, List[RoutRow]] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation of the result."""

        return {
            "eadv": [
                {"eid": row.eid, "att": row.att, "dt": row.dt, "val": row.val}
                for row in self.eadv
            ],
            "rout_tables": {
                table: [row.as_dict() for row in rows]
                for table, rows in self.rout_tables.items()
            },
            "metadata": {
                "entities": list(self.metadata.entities),
                "attributes": list(self.metadata.attributes),
                "bind_dependencies": list(self.metadata.bind_dependencies),
                "total_rows": self.metadata.total_rows,
                "seed": self.metadata.seed,
            },
        }


def generate_mock_data(
    ruleblocks: Sequence[Ruleblock], options: Optional[MockerOptions] = None
) -> MockDataResult:
    """Generate mock EADV data for the dependencies of ``ruleblocks``.

    The PRNG is seeded from ``options.seed`` and consumed in a fixed order:
    EADV rows first, then ``rout_*`` tables. Two calls with the same
    ruleblocks and an explicit seed return equal results.

    Examples
    --------
    >>> from eadv_mocker.foundation import FetchStatement, Ruleblock
    >>> rb = Ruleblock(
    ...     name="ckd",
    ...     rules=(FetchStatement("egfr_last", "eadv", ("lab_bld_egfr",)),),
    ... )
    >>> result = generate_mock_data([rb], MockerOptions(seed=12345))
    >>> result.metadata.total_rows
    9
    """

    opts = resolve_options(options)
    rng = SeededRandom(opts.seed)

    deps = extract_dependencies(ruleblocks)
    entities = generate_entity_ids(opts.entity_count, opts.entity_id_start)

    eadv = generate_eadv_rows(deps.eadv_attributes, entities, opts, rng)
    rout_tables = (
        generate_rout_tables(deps.bind_dependencies, entities, opts, rng)
        if opts.include_mock_bind_tables
        else {}
    )

    metadata = MockMetadata(
        entities=entities,
        attributes=list(deps.eadv_attributes),
        bind_dependencies=list(deps.bind_dependencies),
        total_rows=len(eadv),
        seed=opts.seed,
    )
    logger.debug(
        "Generated %d EADV rows for %d entities x %d attributes "
        "(%d rout tables, distribution=%s, seed=%d)",
        len(eadv),
        len(entities),
        len(metadata.attributes),
        len(rout_tables),
        opts.date_distribution.value,
        opts.seed,
    )
    return MockDataResult(eadv=eadv, rout_tables=rout_tables, metadata=metadata)
