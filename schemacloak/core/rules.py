"""Sensitivity rules deciding which schema nodes hold sensitive values."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class RuleKind(Enum):
    """Kinds of sensitivity rules."""

    BY_TYPE = "by_type"
    BY_ATTRIBUTES = "by_attributes"


@dataclass(frozen=True)
class SensitivityRule:
    """
    A predicate over a schema node deciding whether its value is sensitive.

    Attributes:
        kind: How the rule matches a schema node
        type_name: Schema ``type`` to match for BY_TYPE rules
        attributes: Key/value pairs the schema node must carry for
            BY_ATTRIBUTES rules; an empty mapping matches every node

    Examples:
        >>> SensitivityRule.by_type("password").matches({"type": "password"})
        True
        >>> rule = SensitivityRule.by_attributes({"type": "string", "format": "password"})
        >>> rule.matches({"type": "string", "format": "password", "title": "Secret"})
        True
        >>> rule.matches({"type": "string"})
        False
    """

    kind: RuleKind
    type_name: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        """Validate rule fields after initialization."""
        if self.kind == RuleKind.BY_TYPE:
            if not isinstance(self.type_name, str):
                raise ValueError("BY_TYPE rule requires a string type_name")
        elif self.kind == RuleKind.BY_ATTRIBUTES:
            if not isinstance(self.attributes, Mapping):
                raise ValueError("BY_ATTRIBUTES rule requires a mapping of attributes")
            # Read-only copy
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def by_type(cls, type_name: str) -> "SensitivityRule":
        """Create a rule matching schema nodes whose ``type`` equals ``type_name``."""
        return cls(RuleKind.BY_TYPE, type_name=type_name)

    @classmethod
    def by_attributes(cls, attributes: Mapping[str, Any]) -> "SensitivityRule":
        """Create a rule matching schema nodes carrying all of ``attributes``."""
        return cls(RuleKind.BY_ATTRIBUTES, attributes=attributes)

    def matches(self, schema_node: Any) -> bool:
        """Check whether this rule matches a schema node."""
        if not isinstance(schema_node, Mapping):
            return False

        if self.kind == RuleKind.BY_TYPE:
            return strict_equals(schema_node.get("type"), self.type_name)

        for key, expected in self.attributes.items():
            if key not in schema_node:
                return False
            if not strict_equals(schema_node[key], expected):
                return False
        return True

    def to_config(self) -> Union[str, dict[str, Any]]:
        """Convert the rule back into its plain policy-file representation."""
        if self.kind == RuleKind.BY_TYPE:
            return str(self.type_name)
        return dict(self.attributes)

    def __hash__(self) -> int:
        if self.kind == RuleKind.BY_TYPE:
            return hash((self.kind, self.type_name))
        return hash((self.kind, tuple(sorted(self.attributes, key=str))))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SensitivityRule):
            return NotImplemented
        if self.kind != other.kind:
            return False
        if self.kind == RuleKind.BY_TYPE:
            return self.type_name == other.type_name
        if self.attributes.keys() != other.attributes.keys():
            return False
        return all(
            strict_equals(value, other.attributes[key]) for key, value in self.attributes.items()
        )


RuleLike = Union[SensitivityRule, str, Mapping[str, Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values by type and value.

    Integers and floats are one number type, so ``1`` equals ``1.0``, but
    booleans stay distinct and ``True`` never equals ``1``.
    """
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def coerce_rule(rule: RuleLike) -> SensitivityRule:
    """
    Convert a bare type name or attribute mapping into a SensitivityRule.

    Raises:
        ValueError: If the rule is neither a string, a mapping nor a rule
    """
    if isinstance(rule, SensitivityRule):
        return rule
    if isinstance(rule, str):
        return SensitivityRule.by_type(rule)
    if isinstance(rule, Mapping):
        return SensitivityRule.by_attributes(rule)
    raise ValueError(
        f"Sensitivity rule must be a type name or attribute mapping, got {type(rule).__name__}"
    )


def coerce_rules(rules: Iterable[RuleLike]) -> tuple[SensitivityRule, ...]:
    """Convert an ordered collection of rule-like values into rules."""
    if isinstance(rules, (str, Mapping, SensitivityRule)):
        rules = [rules]
    return tuple(coerce_rule(rule) for rule in rules)


def matches_sensitivity_rule(
    schema_node: Any, rules: Optional[Iterable[RuleLike]] = None
) -> bool:
    """
    Check whether a schema node matches any rule in an ordered rule set.

    Args:
        schema_node: The schema node to test (may be None)
        rules: Ordered rules; bare strings match on ``type`` and mappings
            match on attributes. None selects DEFAULT_RULES

    Returns:
        True on the first matching rule, False if none match or the schema
        node is absent
    """
    if not isinstance(schema_node, Mapping):
        return False

    return any(rule.matches(schema_node) for rule in usable_rules(rules))


def usable_rules(rules: Optional[Iterable[RuleLike]] = None) -> tuple[SensitivityRule, ...]:
    """
    Coerce a rule set once for repeated matching.

    None selects DEFAULT_RULES and a single string, mapping or rule counts as
    one rule. Values that are neither are dropped, since an unrecognised rule
    never matches.
    """
    if rules is None:
        return DEFAULT_RULES
    if isinstance(rules, (str, Mapping, SensitivityRule)):
        rules = [rules]

    recognised = []
    for rule in rules:
        try:
            recognised.append(coerce_rule(rule))
        except ValueError:
            logger.debug(f"Ignoring unrecognised sensitivity rule {rule!r}")
    return tuple(recognised)


DEFAULT_RULES: tuple[SensitivityRule, ...] = (
    SensitivityRule.by_type("password"),
    SensitivityRule.by_attributes({"type": "string", "format": "password"}),
)
