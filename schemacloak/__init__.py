"""SchemaCloak: schema-driven obfuscation of sensitive values.

SchemaCloak walks a value together with a JSON-schema-like description of
its shape, replaces the fields the schema marks as sensitive with a
placeholder (or a computed replacement), and can later restore the real
values in an edited copy by reconciling it against the previous value.
"""

__version__ = "0.1.0"
__author__ = "SchemaCloak Team"
__email__ = "contact@example.com"

# Core API exports
from .core import (
    DEFAULT_PLACEHOLDER,
    DEFAULT_PLACEHOLDER_STRATEGY,
    DEFAULT_POLICY,
    DEFAULT_REDACT,
    DEFAULT_RULES,
    HASH_SHA256,
    LAST_FOUR,
    # Exceptions
    ConfigurationError,
    # Policy system
    ObfuscationPolicy,
    PolicyError,
    PolicyInheritanceError,
    PolicyLoader,
    PolicyValidationError,
    # Strategy system
    ReplaceKind,
    ReplaceStrategy,
    # Rule system
    RuleKind,
    SchemaCloakError,
    SensitivityRule,
    matches_sensitivity_rule,
    wrap_replace,
)
from .defaults import (
    get_default_policy,
    get_policy_preset,
    get_redacting_policy,
    get_sensitive_marker_policy,
)
from .engine import SchemaCloakEngine
from .obfuscator import (
    MISSING,
    reconcile,
    transform_array,
    transform_object,
    transform_value,
)

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    # Traversal
    "transform_value",
    "transform_object",
    "transform_array",
    "reconcile",
    "MISSING",
    # Engine
    "SchemaCloakEngine",
    # Rule system
    "RuleKind",
    "SensitivityRule",
    "DEFAULT_RULES",
    "matches_sensitivity_rule",
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
    "get_default_policy",
    "get_sensitive_marker_policy",
    "get_redacting_policy",
    "get_policy_preset",
    # Exceptions
    "SchemaCloakError",
    "PolicyError",
    "PolicyValidationError",
    "PolicyInheritanceError",
    "ConfigurationError",
]
