"""Foundational building blocks for mock data generation.

This package exposes the rule record contract produced by the rule compiler
and the dependency extraction that decides which EADV attributes and
``rout_*`` tables must be materialised.
"""

from .dependencies import (
    DependencyBuilder,
    ExtractedDependencies,
    expand_wildcard_attribute,
    expand_wildcard_attributes,
    extract_attribute_list,
    extract_dependencies,
    filter_concrete_attributes,
    is_wildcard_attribute,
)
from .rule_contract import (
    BindStatement,
    ComputeCondition,
    ComputeStatement,
    FetchStatement,
    RuleContract,
    Ruleblock,
    RuleStatement,
    RuleType,
)

__all__ = [
    "DependencyBuilder",
    "ExtractedDependencies",
    "expand_wildcard_attribute",
    "expand_wildcard_attributes",
    "extract_attribute_list",
    "extract_dependencies",
    "filter_concrete_attributes",
    "is_wildcard_attribute",
    "BindStatement",
    "ComputeCondition",
    "ComputeStatement",
    "FetchStatement",
    "RuleContract",
    "Ruleblock",
    "RuleStatement",
    "RuleType",
]
