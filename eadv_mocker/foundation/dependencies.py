"""Dependency extraction and wildcard expansion.

:func:`extract_dependencies` answers two questions about a set of ruleblocks:
which EADV attributes must exist, and which ``rout_<ruleblock>`` tables (and
variables in them) are read through bind statements. Wildcard attributes are
kept verbatim here; they are only expanded into concrete names when rows are
generated.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Tuple

from .rule_contract import BindStatement, ComputeStatement, FetchStatement, Ruleblock

if TYPE_CHECKING:
    from eadv_mocker.synthetic.random_source import SeededRandom

ROUT_TABLE_PREFIX = "rout_"
WILDCARD_MARKERS = ("%", "*")
SUFFIX_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 2


@dataclass(frozen=True)
class ExtractedDependencies:
    """Attributes and bind tables required by a set of ruleblocks.

    Attributes
    ----------
    eadv_attributes:
        Distinct attribute names (wildcards included) in first-seen order.
    bind_dependencies:
        ``rout_<ruleblock>`` table name -> distinct variable names, both in
        first-seen order.
    """

    eadv_attributes: Tuple[str, ...]
    bind_dependencies: Mapping[str, Tuple[str, ...]]


class DependencyBuilder:
    """Accumulator used for a single extraction.

    Sets are kept as insertion-ordered dicts so that iteration order, and with
    it the PRNG draw order downstream, does not depend on string hashing.
    """

    def __init__(self) -> None:
        self._attributes: Dict[str, None] = {}
        self._bindings: Dict[str, Dict[str, None]] = {}

    def add_fetch(self, rule: FetchStatement) -> None:
        for attribute in rule.attribute_list:
            self._attributes.setdefault(attribute, None)

    def add_bind(self, rule: BindStatement) -> None:
        table_name = f"{ROUT_TABLE_PREFIX}{rule.source_ruleblock}"
        self._bindings.setdefault(table_name, {}).setdefault(rule.source_variable, None)

    def add_rule(self, rule: object) -> None:
        if isinstance(rule, FetchStatement):
            self.add_fetch(rule)
        elif isinstance(rule, BindStatement):
            self.add_bind(rule)
        elif isinstance(rule, ComputeStatement):
            # compute rules only reference variables that are already defined
            pass
        # anything else is outside the contract and contributes nothing

    def build(self) -> ExtractedDependencies:
        return ExtractedDependencies(
            eadv_attributes=tuple(self._attributes),
            bind_dependencies={
                table: tuple(variables) for table, variables in self._bindings.items()
            },
        )


def extract_dependencies(ruleblocks: Iterable[Ruleblock]) -> ExtractedDependencies:
    """Collect EADV attributes and bind dependencies from parsed ruleblocks."""

    builder = DependencyBuilder()
    for rb in ruleblocks:
        for rule in rb.rules:
            builder.add_rule(rule)
    return builder.build()


def extract_attribute_list(ruleblocks: Iterable[Ruleblock]) -> List[str]:
    """Flat list of the unique attributes referenced by ``ruleblocks``."""

    return list(extract_dependencies(ruleblocks).eadv_attributes)


def is_wildcard_attribute(attribute: str) -> bool:
    return any(marker in attribute for marker in WILDCARD_MARKERS)


def _random_suffix(rng: SeededRandom, length: int = SUFFIX_LENGTH) -> str:
    return "".join(
        SUFFIX_ALPHABET[math.floor(rng.random() * len(SUFFIX_ALPHABET))]
        for _ in range(length)
    )


def expand_wildcard_attribute(attribute: str, rng: SeededRandom) -> str:
    """Replace wildcard markers with random two-letter suffixes.

    ``icd_c18%`` becomes e.g. ``icd_c18xy``. All ``%`` markers are replaced
    left to right first, then all ``*`` markers; each marker consumes two
    draws. Concrete names are returned unchanged without drawing.
    """

    if not is_wildcard_attribute(attribute):
        return attribute

    expanded = attribute
    for marker in WILDCARD_MARKERS:
        while marker in expanded:
            expanded = expanded.replace(marker, _random_suffix(rng), 1)
    return expanded


def expand_wildcard_attributes(
    attributes: Iterable[str], rng: SeededRandom
) -> List[str]:
    """Expand every attribute in iteration order, one concrete name per input.

    Duplicates are not collapsed: the same pattern twice yields two
    (usually different) concrete names.
    """

    return [expand_wildcard_attribute(attribute, rng) for attribute in attributes]


def filter_concrete_attributes(attributes: Iterable[str]) -> List[str]:
    """Drop wildcard attributes instead of expanding them.

    .. deprecated::
        Use :func:`expand_wildcard_attributes` for mock data generation.
    """

    warnings.warn(
        "filter_concrete_attributes is deprecated; use expand_wildcard_attributes",
        DeprecationWarning,
        stacklevel=2,
    )
    return [attribute for attribute in attributes if not is_wildcard_attribute(attribute)]
