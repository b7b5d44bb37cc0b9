"""Core rule, strategy and policy types for SchemaCloak."""

from .exceptions import (
    ConfigurationError,
    PolicyError,
    PolicyInheritanceError,
    PolicyValidationError,
    SchemaCloakError,
)
from .policies import DEFAULT_POLICY, ObfuscationPolicy
from .policy_loader import PolicyFileSchema, PolicyLoader
from .rules import (
    DEFAULT_RULES,
    RuleKind,
    SensitivityRule,
    coerce_rule,
    coerce_rules,
    matches_sensitivity_rule,
    usable_rules,
)
from .strategies import (
    DEFAULT_PLACEHOLDER,
    DEFAULT_PLACEHOLDER_STRATEGY,
    DEFAULT_REDACT,
    HASH_SHA256,
    LAST_FOUR,
    ReplaceKind,
    ReplaceStrategy,
    wrap_replace,
)

__all__ = [
    # Rule system
    "RuleKind",
    "SensitivityRule",
    "DEFAULT_RULES",
    "coerce_rule",
    "coerce_rules",
    "matches_sensitivity_rule",
    "usable_rules",
    # Strategy system
    "ReplaceKind",
    "ReplaceStrategy",
    "DEFAULT_PLACEHOLDER",
    "DEFAULT_PLACEHOLDER_STRATEGY",
    "DEFAULT_REDACT",
    "LAST_FOUR",
    "HASH_SHA256",
    "wrap_replace",
    # Policy system
    "ObfuscationPolicy",
    "DEFAULT_POLICY",
    "PolicyLoader",
    "PolicyFileSchema",
    # Exceptions
    "SchemaCloakError",
    "PolicyError",
    "PolicyValidationError",
    "PolicyInheritanceError",
    "ConfigurationError",
]
