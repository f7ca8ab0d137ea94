"""Built-in value generators for common clinical attributes.

A value generator is any callable that takes the shared :class:`SeededRandom`
and returns a number, a string or ``None``. The PRNG argument is mandatory so
that every value in a generated dataset is reproducible from the seed.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Mapping, Sequence, Union

from .random_source import SeededRandom, random_float, random_int, random_pick

Value = Union[int, float, str, None]
ValueGenerator = Callable[[SeededRandom], Value]


def create_range_generator(
    min_value: float, max_value: float, decimals: int = 0
) -> ValueGenerator:
    """Create a numeric generator over ``[min_value, max_value]``.

    ``decimals == 0`` yields integers; otherwise floats rounded to ``decimals``.
    """

    if min_value > max_value:
        raise ValueError("min_value must be <= max_value")
    if decimals < 0:
        raise ValueError("decimals must be >= 0")

    if decimals == 0:
        lo, hi = math.ceil(min_value), math.floor(max_value)
        if lo > hi:
            raise ValueError(
                f"no integer lies within [{min_value}, {max_value}]; pass decimals > 0"
            )

        def _int_generator(rng: SeededRandom) -> Value:
            return random_int(rng, lo, hi)

        return _int_generator

    def _float_generator(rng: SeededRandom) -> Value:
        return random_float(rng, min_value, max_value, decimals)

    return _float_generator


def create_discrete_generator(values: Sequence[Value]) -> ValueGenerator:
    """Create a generator that picks uniformly from ``values``."""

    choices = tuple(values)
    if not choices:
        raise ValueError("values must contain at least one element")

    def _discrete_generator(rng: SeededRandom) -> Value:
        return random_pick(rng, choices)

    return _discrete_generator


def create_nullable_generator(
    null_probability: float, base_generator: ValueGenerator
) -> ValueGenerator:
    """Wrap ``base_generator`` so it returns ``None`` with ``null_probability``.

    One draw decides nullness; the base generator is only called (and only
    consumes draws) for non-null values.
    """

    if not 0.0 <= null_probability <= 1.0:
        raise ValueError("null_probability must be within [0, 1]")

    def _nullable_generator(rng: SeededRandom) -> Value:
        if rng.random() < null_probability:
            return None
        return base_generator(rng)

    return _nullable_generator


def default_value_generator(rng: SeededRandom) -> Value:
    """Fallback for attributes without a configured generator: 0-100, one decimal."""

    return random_float(rng, 0, 100, 1)


def _ranges(bounds_by_name: Mapping[str, tuple]) -> Dict[str, ValueGenerator]:
    return {name: create_range_generator(*bounds) for name, bounds in bounds_by_name.items()}


# (min, max[, decimals]) per attribute; decimals default to integers
CLINICAL_VALUE_GENERATORS: Dict[str, ValueGenerator] = _ranges(
    {
        # Renal function
        "lab_bld_egfr": (15, 120),
        "lab_bld_creatinine": (50, 500),
        "lab_ua_acr": (0, 300),
        "lab_bld_urea": (2.5, 15, 1),
        # Haematology
        "lab_bld_haemoglobin": (80, 180),
        "lab_bld_hb": (80, 180),
        "lab_bld_wbc": (3, 15, 1),
        "lab_bld_platelet": (100, 400),
        "lab_bld_rbc": (3.5, 6, 2),
        # Metabolic / diabetes
        "lab_bld_hba1c": (4, 12, 1),
        "lab_bld_glucose": (3, 20, 1),
        "lab_bld_glucose_fasting": (3.5, 10, 1),
        # Lipids
        "lab_bld_cholesterol": (3, 8, 1),
        "lab_bld_ldl": (1.5, 5, 1),
        "lab_bld_hdl": (0.8, 2.5, 1),
        "lab_bld_triglycerides": (0.5, 4, 1),
        # Electrolytes
        "lab_bld_potassium": (3, 6, 1),
        "lab_bld_sodium": (130, 150),
        "lab_bld_calcium": (2, 3, 2),
        "lab_bld_phosphate": (0.8, 2, 2),
        # Liver function
        "lab_bld_alt": (10, 100),
        "lab_bld_ast": (10, 80),
        "lab_bld_alp": (30, 150),
        "lab_bld_bilirubin": (5, 30),
        "lab_bld_albumin": (30, 50),
        # Thyroid
        "lab_bld_tsh": (0.3, 5, 2),
        "lab_bld_t4": (10, 25, 1),
        # Urine
        "lab_ua_rbc": (0, 50),
        "lab_ua_wbc": (0, 30),
        "lab_ua_protein": (0, 3),
        # Vitals
        "obs_bp_systolic": (90, 200),
        "obs_bp_diastolic": (50, 120),
        "obs_hr": (50, 120),
        "obs_weight": (40, 150, 1),
        "obs_height": (140, 200, 1),
        "obs_bmi": (16, 45, 1),
    }
)
