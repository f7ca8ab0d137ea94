"""Rule record contract consumed by the dependency extractor.

Parsing ruleblock source text is the rule compiler's job. What reaches this
package is the compiler's output: ruleblocks made of typed rule records. The
records are modelled as a closed set of frozen dataclasses and
:class:`RuleContract` validates JSON-like payloads (e.g. a compiler dump) into
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterable, Mapping, Optional, Tuple, Union


class RuleType(str, Enum):
    """Discriminant of a parsed rule record."""

    FETCH = "fetch"
    BIND = "bind"
    COMPUTE = "compute"


@dataclass(frozen=True)
class FetchStatement:
    """Fetch of one or more attributes from a source table.

    Attributes
    ----------
    assigned_variable:
        Variable the fetched value is assigned to.
    table:
        Source table name (``eadv`` for the observation table).
    attribute_list:
        Attribute names to fetch. Entries may be wildcard patterns such as
        ``icd_c18%``.
    property:
        Column read from the table (``val``, ``dt``...).
    function_name:
        Aggregation applied (``last``, ``count``...).
    """

    rule_type: ClassVar[RuleType] = RuleType.FETCH

    assigned_variable: str
    table: str
    attribute_list: Tuple[str, ...]
    property: str = "val"
    function_name: str = "last"


@dataclass(frozen=True)
class BindStatement:
    """Binding of a variable computed by another ruleblock."""

    rule_type: ClassVar[RuleType] = RuleType.BIND

    assigned_variable: str
    source_ruleblock: str
    source_variable: str
    property: str = "val"


@dataclass(frozen=True)
class ComputeCondition:
    predicate: Optional[str]
    return_value: str


@dataclass(frozen=True)
class ComputeStatement:
    """Conditional expression over variables already defined in the ruleblock."""

    rule_type: ClassVar[RuleType] = RuleType.COMPUTE

    assigned_variable: str
    conditions: Tuple[ComputeCondition, ...] = ()


RuleStatement = Union[FetchStatement, BindStatement, ComputeStatement]


@dataclass(frozen=True)
class Ruleblock:
    """Named, ordered collection of rule records."""

    name: str
    rules: Tuple[RuleStatement, ...] = field(default_factory=tuple)
    text: str = ""
    is_active: bool = True


class RuleContract:
    """Validate raw ruleblock payloads into typed rule records."""

    #: Fields that must be populated per rule type.
    REQUIRED_FIELDS = {
        RuleType.FETCH: {"assigned_variable", "table", "attribute_list"},
        RuleType.BIND: {"assigned_variable", "source_ruleblock", "source_variable"},
        RuleType.COMPUTE: {"assigned_variable"},
    }

    def __init__(self, include_inactive: bool = True) -> None:
        self.include_inactive = include_inactive

    def validate_ruleblocks(
        self, records: Iterable[Mapping[str, Any]]
    ) -> list[Ruleblock]:
        """Validate raw ruleblock dictionaries and return typed ruleblocks.

        Each record needs a ``name`` and a ``rules`` list; every rule needs a
        ``rule_type`` of ``fetch``, ``bind`` or ``compute`` plus the fields in
        :attr:`REQUIRED_FIELDS`.
        """

        ruleblocks: list[Ruleblock] = []
        for idx, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise TypeError(
                    "ruleblock must be a mapping",
                    {"ruleblock_index": idx, "value": record},
                )
            name = record.get("name")
            if not name:
                raise ValueError(
                    "Ruleblock missing required field 'name'",
                    {"ruleblock_index": idx},
                )

            is_active = bool(record.get("is_active", True))
            if not is_active and not self.include_inactive:
                continue

            raw_rules = record.get("rules") or []
            if not isinstance(raw_rules, (list, tuple)):
                raise TypeError(
                    "rules must be a list",
                    {"ruleblock": name, "value": raw_rules},
                )
            rules = tuple(
                self.validate_rule(rule, ruleblock=str(name), rule_index=rule_idx)
                for rule_idx, rule in enumerate(raw_rules)
            )
            ruleblocks.append(
                Ruleblock(
                    name=str(name),
                    rules=rules,
                    text=str(record.get("text", "")),
                    is_active=is_active,
                )
            )
        return ruleblocks

    def validate_rule(
        self, record: Mapping[str, Any], *, ruleblock: str = "", rule_index: int = 0
    ) -> RuleStatement:
        """Validate a single raw rule dictionary."""

        context = {"ruleblock": ruleblock, "rule_index": rule_index}
        if not isinstance(record, Mapping):
            raise TypeError(
                "rule must be a mapping", {**context, "value": record}
            )
        try:
            rule_type = RuleType(str(record.get("rule_type", "")).lower())
        except ValueError:
            raise ValueError(
                "Unknown rule_type", {**context, "value": record.get("rule_type")}
            ) from None

        missing = sorted(
            name for name in self.REQUIRED_FIELDS[rule_type] if not record.get(name)
        )
        if missing:
            raise ValueError(
                "Rule missing required contract fields",
                {**context, "missing_fields": missing},
            )

        if rule_type is RuleType.FETCH:
            attributes = record["attribute_list"]
            if isinstance(attributes, str):
                attributes = [attributes]
            elif not isinstance(attributes, (list, tuple)):
                raise TypeError(
                    "attribute_list must be a string or a list",
                    {**context, "value": attributes},
                )
            return FetchStatement(
                assigned_variable=str(record["assigned_variable"]),
                table=str(record["table"]),
                attribute_list=tuple(str(attr) for attr in attributes),
                property=str(record.get("property") or "val"),
                function_name=str(record.get("function_name") or "last"),
            )
        if rule_type is RuleType.BIND:
            return BindStatement(
                assigned_variable=str(record["assigned_variable"]),
                source_ruleblock=str(record["source_ruleblock"]),
                source_variable=str(record["source_variable"]),
                property=str(record.get("property") or "val"),
            )

        raw_conditions = record.get("conditions") or []
        if not isinstance(raw_conditions, (list, tuple)):
            raise TypeError(
                "conditions must be a list", {**context, "value": raw_conditions}
            )
        conditions = []
        for condition_idx, condition in enumerate(raw_conditions):
            if not isinstance(condition, Mapping):
                raise TypeError(
                    "compute condition must be a mapping",
                    {**context, "condition_index": condition_idx, "value": condition},
                )
            if "return_value" not in condition:
                raise ValueError(
                    "Compute condition missing 'return_value'", context
                )
            predicate = condition.get("predicate")
            conditions.append(
                ComputeCondition(
                    predicate=None if predicate is None else str(predicate),
                    return_value=str(condition["return_value"]),
                )
            )
        return ComputeStatement(
            assigned_variable=str(record["assigned_variable"]),
            conditions=tuple(conditions),
        )

    def to_serialisable(self, ruleblocks: Iterable[Ruleblock]) -> list[dict[str, Any]]:
        """Convert ruleblocks back into JSON-serialisable dictionaries."""

        payload: list[dict[str, Any]] = []
        for rb in ruleblocks:
            rules: list[dict[str, Any]] = []
            for rule in rb.rules:
                if isinstance(rule, FetchStatement):
                    rules.append(
                        {
                            "rule_type": rule.rule_type.value,
                            "assigned_variable": rule.assigned_variable,
                            "table": rule.table,
                            "attribute_list": list(rule.attribute_list),
                            "property": rule.property,
                            "function_name": rule.function_name,
                        }
                    )
                elif isinstance(rule, BindStatement):
                    rules.append(
                        {
                            "rule_type": rule.rule_type.value,
                            "assigned_variable": rule.assigned_variable,
                            "source_ruleblock": rule.source_ruleblock,
                            "source_variable": rule.source_variable,
                            "property": rule.property,
                        }
                    )
                else:
                    rules.append(
                        {
                            "rule_type": rule.rule_type.value,
                            "assigned_variable": rule.assigned_variable,
                            "conditions": [
                                {
                                    "predicate": c.predicate,
                                    "return_value": c.return_value,
                                }
                                for c in rule.conditions
                            ],
                        }
                    )
            payload.append(
                {
                    "name": rb.name,
                    "text": rb.text,
                    "is_active": rb.is_active,
                    "rules": rules,
                }
            )
        return payload
