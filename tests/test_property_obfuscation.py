"""Property-based tests for obfuscation and reconciliation."""

from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from schemacloak import DEFAULT_PLACEHOLDER
from schemacloak.obfuscator import reconcile, transform_value

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=20,
)

leaf_schemas = st.sampled_from(
    [
        {"type": "string"},
        {"type": "password"},
        {"type": "string", "format": "password"},
        {"type": "integer"},
        {},
    ]
)


def _object_pair(children: st.SearchStrategy) -> st.SearchStrategy:
    """Build an object value and its schema from child value/schema pairs."""
    entries = st.dictionaries(st.text(min_size=1, max_size=8), children, max_size=4)

    def build(items: dict[str, tuple[Any, dict]]) -> tuple[dict, dict]:
        value = {key: pair[0] for key, pair in items.items()}
        schema = {
            "type": "object",
            "properties": {key: pair[1] for key, pair in items.items()},
        }
        return value, schema

    return entries.map(build)


def _tuple_array_pair(children: st.SearchStrategy) -> st.SearchStrategy:
    """Build an array value with a positional items schema."""

    def build(pairs: list[tuple[Any, dict]]) -> tuple[list, dict]:
        return [pair[0] for pair in pairs], {
            "type": "array",
            "items": [pair[1] for pair in pairs],
        }

    return st.lists(children, max_size=4).map(build)


def _uniform_array_pair(children: st.SearchStrategy) -> st.SearchStrategy:
    """Build an array value whose elements share one leaf schema."""
    return st.tuples(st.lists(st.text(max_size=10), max_size=4), leaf_schemas).map(
        lambda pair: (pair[0], {"type": "array", "items": pair[1]})
    )


value_schema_pairs = st.recursive(
    st.tuples(st.text(max_size=20) | st.integers() | st.none(), leaf_schemas),
    lambda children: _object_pair(children)
    | _tuple_array_pair(children)
    | _uniform_array_pair(children),
    max_leaves=15,
)


class TestObfuscationProperties:
    """Property tests over generated values and schemas."""

    @pytest.mark.property
    @given(pair=value_schema_pairs)
    def test_reconcile_restores_obfuscated_value(self, pair: tuple[Any, dict]) -> None:
        """Property: reconciling an obfuscated value with the original restores it."""
        value, schema = pair
        obfuscated = transform_value(value, schema)
        assert reconcile(obfuscated, value) == value

    @pytest.mark.property
    @given(pair=value_schema_pairs)
    def test_obfuscation_is_idempotent(self, pair: tuple[Any, dict]) -> None:
        """Property: applying obfuscation twice equals applying it once."""
        value, schema = pair
        once = transform_value(value, schema)
        assert transform_value(once, schema) == once

    @pytest.mark.property
    @given(value=json_values)
    def test_empty_schema_is_identity(self, value: Any) -> None:
        """Property: an empty or absent schema returns the value itself."""
        assert transform_value(value, {}) is value
        assert transform_value(value, None) is value

    @pytest.mark.property
    @given(value=json_values)
    def test_password_schema_replaces_any_value(self, value: Any) -> None:
        """Property: every value under a password schema becomes the placeholder."""
        assert transform_value(value, {"type": "password"}) == DEFAULT_PLACEHOLDER
        assert transform_value(value, {"type": "string", "format": "password"}) == DEFAULT_PLACEHOLDER

    @pytest.mark.property
    @given(value=json_values)
    def test_reconcile_without_placeholders_is_identity(self, value: Any) -> None:
        """Property: reconciling a value against itself returns an equal value."""
        assert reconcile(value, value) == value
