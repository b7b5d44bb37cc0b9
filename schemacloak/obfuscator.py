"""Schema-driven obfuscation of nested values and its reconciliation.

``transform_value`` walks a value in lock-step with a JSON-schema-like node
and replaces the values of sensitive nodes. ``reconcile`` walks an edited,
possibly obfuscated value against the trusted previous value and puts the
real values back wherever the placeholder is found.

Both functions are total: malformed schemas and values that disagree with
their schema are passed through unchanged.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, time
from typing import Any, Optional

from .core.rules import RuleLike, SensitivityRule, strict_equals, usable_rules
from .core.strategies import DEFAULT_PLACEHOLDER, ReplaceFunc, wrap_replace

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for "no previous value known", distinct from ``None``."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and not callable(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_date(value: Any) -> bool:
    return isinstance(value, (date, time))


def _rebuild_sequence(original: Any, items: list[Any]) -> Any:
    if isinstance(original, tuple):
        return tuple(items)
    return items


def transform_value(
    value: Any,
    schema: Any,
    replace: Any = None,
    rules: Optional[Iterable[RuleLike]] = None,
) -> Any:
    """
    Obfuscate a value based on a JSON-schema-like description of it.

    Sensitivity is checked before structure: a node matching any rule is
    replaced wholesale, even when it describes an object or array.

    Args:
        value: The value to obfuscate
        schema: Schema node describing the value; anything that is not a
            mapping disables obfuscation
        replace: Replacement constant or callable taking the original value;
            None substitutes DEFAULT_PLACEHOLDER
        rules: Ordered sensitivity rules; None selects DEFAULT_RULES and an
            empty list matches nothing

    Returns:
        The obfuscated value; containers on the traversed path are copies
        and the input is never modified
    """
    if not isinstance(schema, Mapping):
        return value

    replace_func = wrap_replace(DEFAULT_PLACEHOLDER if replace is None else replace)
    rule_set = usable_rules(rules)

    return _transform(value, schema, replace_func, rule_set)


def _transform(
    value: Any,
    schema: Any,
    replace_func: ReplaceFunc,
    rules: tuple[SensitivityRule, ...],
) -> Any:
    if not isinstance(schema, Mapping):
        return value

    if any(rule.matches(schema) for rule in rules):
        return replace_func(value)

    schema_type = schema.get("type")

    if schema_type == "object" and _is_mapping(value):
        properties = schema.get("properties")
        new_obj = dict(value)
        if not isinstance(properties, Mapping):
            return new_obj

        for property_name, property_schema in properties.items():
            if property_name not in value:
                # Skip missing properties
                continue
            new_obj[property_name] = _transform(
                value[property_name], property_schema, replace_func, rules
            )
        return new_obj

    if schema_type == "array" and _is_sequence(value):
        items = schema.get("items")
        if _is_sequence(items):
            # Positional schema; elements past the end have no schema
            new_items = [
                _transform(item, items[index] if index < len(items) else None, replace_func, rules)
                for index, item in enumerate(value)
            ]
        else:
            new_items = [_transform(item, items, replace_func, rules) for item in value]
        return _rebuild_sequence(value, new_items)

    if schema_type in ("object", "array"):
        logger.debug(
            f"Value of type {type(value).__name__} does not match schema type {schema_type}, passing through"
        )
    return value


def transform_object(
    obj: Any,
    schema: Any,
    replace: Any = None,
    rules: Optional[Iterable[RuleLike]] = None,
) -> Any:
    """Alias of :func:`transform_value` for object-rooted schemas."""
    return transform_value(obj, schema, replace, rules)


def transform_array(
    arr: Any,
    schema: Any,
    replace: Any = None,
    rules: Optional[Iterable[RuleLike]] = None,
) -> Any:
    """Alias of :func:`transform_value` for array-rooted schemas."""
    return transform_value(arr, schema, replace, rules)


def reconcile(
    new_value: Any,
    previous_value: Any = MISSING,
    placeholder: Any = DEFAULT_PLACEHOLDER,
) -> Any:
    """
    Replace obfuscated markers in a new value with the previous real values.

    Useful when accepting an edited copy of an obfuscated document: wherever
    the client sent back the placeholder, the stored value is kept.

    Args:
        new_value: The value to search for the placeholder
        previous_value: The trusted value to restore from; MISSING means
            nothing is known and ``new_value`` is accepted as-is
        placeholder: The marker to search for

    Returns:
        The reconciled value, with exactly the keys and length of ``new_value``
    """
    # No pre-existing value: the new value is authoritative
    if previous_value is MISSING:
        return new_value

    if strict_equals(new_value, placeholder):
        return previous_value

    if _is_sequence(new_value) and _is_sequence(previous_value):
        restored = [
            reconcile(
                item,
                previous_value[index] if index < len(previous_value) else MISSING,
                placeholder,
            )
            for index, item in enumerate(new_value)
        ]
        return _rebuild_sequence(new_value, restored)

    # Dates are never placeholders and must not be destructured
    if _is_date(new_value):
        return new_value

    if isinstance(new_value, Mapping) and isinstance(previous_value, Mapping):
        new_obj = dict(new_value)
        for key in new_obj:
            new_obj[key] = reconcile(new_obj[key], previous_value.get(key, MISSING), placeholder)
        return new_obj

    return new_value
