"""Pre-configured scenario packs for mock data generation.

Each scenario is a ready-to-use :class:`MockerOptions` describing a typical
shape of clinical history that rule tests need to exercise. All scenarios use
fixed seeds so fixtures built from them are reproducible.

Examples
--------
>>> from eadv_mocker.synthetic.scenarios import EPISODIC_ADMISSION_SCENARIO
>>> from eadv_mocker.mocker import generate_mock_data
>>>
>>> result = generate_mock_data(ruleblocks, EPISODIC_ADMISSION_SCENARIO)
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict

from eadv_mocker.synthetic.dates import DateDistribution
from eadv_mocker.synthetic.generator import DateRange, MockerOptions
from eadv_mocker.synthetic.values import CLINICAL_VALUE_GENERATORS

# Fixed calendar year so fixtures do not drift with the wall clock
_REFERENCE_YEAR = DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 12, 31))

# Defaults with a fixed seed and window, useful for general testing
BASELINE_SCENARIO = MockerOptions(
    date_range=_REFERENCE_YEAR,
    seed=12345,
)

# Long-term condition under active monitoring: frequent, increasingly recent tests
CHRONIC_MONITORING_SCENARIO = MockerOptions(
    entity_count=10,
    observations_per_entity=8,
    date_range=_REFERENCE_YEAR,
    date_distribution=DateDistribution.RECENT_WEIGHTED,
    value_generators=CLINICAL_VALUE_GENERATORS,
    seed=2024,
)

# Tests ordered in bursts around hospital stays or illness episodes
EPISODIC_ADMISSION_SCENARIO = MockerOptions(
    entity_count=5,
    observations_per_entity=9,
    date_range=_REFERENCE_YEAR,
    date_distribution=DateDistribution.CLUSTERED,
    value_generators=CLINICAL_VALUE_GENERATORS,
    seed=777,
)

# A single observation per attribute, e.g. newly registered patients
SPARSE_HISTORY_SCENARIO = MockerOptions(
    entity_count=20,
    observations_per_entity=1,
    date_range=_REFERENCE_YEAR,
    value_generators=CLINICAL_VALUE_GENERATORS,
    seed=31,
)

# Wider cohort for volume-oriented pipeline tests
LARGE_COHORT_SCENARIO = MockerOptions(
    entity_count=500,
    entity_id_start=100001,
    observations_per_entity=4,
    date_range=DateRange(start=datetime(2022, 1, 1), end=datetime(2024, 12, 31)),
    value_generators=CLINICAL_VALUE_GENERATORS,
    seed=99,
)

SCENARIOS: Dict[str, MockerOptions] = {
    "baseline": BASELINE_SCENARIO,
    "chronic-monitoring": CHRONIC_MONITORING_SCENARIO,
    "episodic-admission": EPISODIC_ADMISSION_SCENARIO,
    "sparse-history": SPARSE_HISTORY_SCENARIO,
    "large-cohort": LARGE_COHORT_SCENARIO,
}


def get_scenario(name: str, **overrides) -> MockerOptions:
    """Look up a scenario by name, optionally replacing some of its fields."""

    try:
        scenario = SCENARIOS[name]
    except KeyError:
        raise ValueError(
            f"unknown scenario {name!r}; expected one of {', '.join(SCENARIOS)}"
        ) from None
    return replace(scenario, **overrides) if overrides else scenario
