"""SchemaCloakEngine - high-level API binding an obfuscation policy."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from schemacloak.core.policies import ObfuscationPolicy
from schemacloak.core.policy_loader import PolicyLoader
from schemacloak.core.rules import matches_sensitivity_rule
from schemacloak.defaults import get_default_policy
from schemacloak.observability.logging import get_logger, trace_operation
from schemacloak.obfuscator import MISSING, reconcile, transform_value


class SchemaCloakEngine:
    """High-level API for obfuscating and reconciling schema-described values.

    Examples:
        # Simple usage with defaults
        engine = SchemaCloakEngine()
        masked = engine.obfuscate(user, user_schema)
        stored = engine.unobfuscate(edited, user)

        # Policy loaded from YAML
        engine = SchemaCloakEngine.from_policy_file("policies/api.yaml")
    """

    def __init__(self, policy: ObfuscationPolicy | None = None):
        """Initialize the engine.

        Args:
            policy: Policy to apply; defaults to :func:`get_default_policy`
        """
        self._policy = policy or get_default_policy()
        self._replace = self._policy.replace_func()

    @classmethod
    def from_policy_file(
        cls, policy_path: str | Path, base_path: Path | None = None
    ) -> "SchemaCloakEngine":
        """Create an engine from a YAML policy file."""
        policy = PolicyLoader(base_path=base_path).load_policy(policy_path)
        get_logger(__name__).info(
            "Loaded policy file", policy_file=str(policy_path), rule_count=len(policy.rules)
        )
        return cls(policy=policy)

    @property
    def policy(self) -> ObfuscationPolicy:
        """Get the policy bound to this engine."""
        return self._policy

    def obfuscate(self, value: Any, schema: Any) -> Any:
        """Obfuscate ``value`` according to ``schema`` and the engine policy."""
        schema_type = schema.get("type") if isinstance(schema, Mapping) else None
        with trace_operation("obfuscate", schema_type=schema_type):
            return transform_value(value, schema, self._replace, self._policy.rules)

    def obfuscate_object(self, obj: Any, schema: Any) -> Any:
        """Obfuscate an object-rooted value."""
        return self.obfuscate(obj, schema)

    def obfuscate_array(self, arr: Any, schema: Any) -> Any:
        """Obfuscate an array-rooted value."""
        return self.obfuscate(arr, schema)

    def unobfuscate(self, new_value: Any, previous_value: Any = MISSING) -> Any:
        """Restore previous values wherever ``new_value`` holds the placeholder."""
        with trace_operation("unobfuscate", has_previous=previous_value is not MISSING):
            return reconcile(new_value, previous_value, self._policy.placeholder)

    def is_sensitive(self, schema_node: Any) -> bool:
        """Check whether the engine policy marks a schema node as sensitive."""
        return matches_sensitivity_rule(schema_node, self._policy.rules)
