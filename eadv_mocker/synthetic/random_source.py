"""Seeded pseudo-random source shared by every generator.

A plain linear congruential generator is used instead of :mod:`random` so that
the exact draw sequence for a given seed is fixed by this module alone. Every
helper below consumes exactly one draw.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

# glibc's classic LCG parameters
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31


class SeededRandom:
    """Deterministic float stream in ``[0, 1)`` derived from an integer seed.

    Two instances built from the same seed yield identical sequences. The
    instance owns its state exclusively; share an instance only when the
    draw order between consumers is fixed.
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        self._seed = int(seed)
        self._state = self._seed % LCG_MODULUS

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> int:
        return self._state

    def random(self) -> float:
        self._state = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self._seed}, state={self._state})"


def random_int(rng: SeededRandom, min_value: int, max_value: int) -> int:
    """Return an integer in ``[min_value, max_value]`` (both inclusive)."""

    return math.floor(rng.random() * (max_value - min_value + 1)) + min_value


def random_float(
    rng: SeededRandom, min_value: float, max_value: float, decimals: int = 1
) -> float:
    """Return a float in ``[min_value, max_value]`` rounded half-up to ``decimals``."""

    value = rng.random() * (max_value - min_value) + min_value
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def random_pick(rng: SeededRandom, items: Sequence[T]) -> T:
    """Pick one element of ``items`` uniformly."""

    if not items:
        raise ValueError("cannot pick from an empty sequence")
    return items[math.floor(rng.random() * len(items))]
