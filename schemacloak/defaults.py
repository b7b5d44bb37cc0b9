"""Default constants and policy presets for SchemaCloak."""

from schemacloak.core.policies import DEFAULT_POLICY, ObfuscationPolicy
from schemacloak.core.rules import DEFAULT_RULES, SensitivityRule
from schemacloak.core.strategies import DEFAULT_PLACEHOLDER, DEFAULT_REDACT

# Custom marker accepted by the sensitive-marker preset
SENSITIVE_MARKER = "isSensitive"


def get_default_policy() -> ObfuscationPolicy:
    """Return the default policy.

    Masks schema nodes of type ``password`` and strings with format
    ``password`` using DEFAULT_PLACEHOLDER.
    """
    return DEFAULT_POLICY


def get_sensitive_marker_policy() -> ObfuscationPolicy:
    """Return the default policy extended with an ``isSensitive: true`` marker rule.

    Any schema node carrying ``isSensitive: true`` is replaced as a whole,
    including object and array nodes.
    """
    return DEFAULT_POLICY.with_rules(SensitivityRule.by_attributes({SENSITIVE_MARKER: True}))


def get_redacting_policy() -> ObfuscationPolicy:
    """Return the default rules with length-preserving redaction instead of a placeholder.

    Redacted values are not the placeholder, so they cannot be reconciled.
    """
    return ObfuscationPolicy(rules=DEFAULT_RULES, replace=DEFAULT_REDACT)


_PRESETS = {
    "default": get_default_policy,
    "sensitive-marker": get_sensitive_marker_policy,
    "redacting": get_redacting_policy,
}


def get_policy_preset(preset_name: str) -> ObfuscationPolicy:
    """Get a predefined policy by name.

    Args:
        preset_name: One of 'default', 'sensitive-marker' or 'redacting'

    Returns:
        The preset ObfuscationPolicy

    Raises:
        ValueError: If preset_name is not recognized
    """
    if preset_name not in _PRESETS:
        raise ValueError(
            f"Unknown policy preset '{preset_name}'. Available: {sorted(_PRESETS)}"
        )
    return _PRESETS[preset_name]()


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "DEFAULT_RULES",
    "SENSITIVE_MARKER",
    "get_default_policy",
    "get_sensitive_marker_policy",
    "get_redacting_policy",
    "get_policy_preset",
]
