"""SchemaCloak exception hierarchy.

The traversal core never raises for malformed schemas or mismatched values;
these exceptions belong to the configuration surfaces around it (policy
files, observability config, the CLI).
"""

import re
from typing import Any, Dict, List, Optional


def _error_code(cls: type) -> str:
    """PolicyValidationError -> POLICY_VALIDATION_ERROR."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).upper()


class SchemaCloakError(Exception):
    """Base exception for all SchemaCloak errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable identifier derived from the class name
        context: Where the error happened (file, config section, ...)
        recovery_suggestions: Hints shown to the user alongside the message
    """

    component = "core"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recovery_suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or _error_code(type(self))
        self.context = dict(context or {})
        self.recovery_suggestions = list(recovery_suggestions or [])

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def add_recovery_suggestion(self, suggestion: str) -> None:
        if suggestion not in self.recovery_suggestions:
            self.recovery_suggestions.append(suggestion)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a plain dictionary for structured logs."""
        return {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "component": self.component,
            "message": self.message,
            "context": self.context,
            "recovery_suggestions": self.recovery_suggestions,
        }


class PolicyError(SchemaCloakError):
    """Raised when loading or resolving an obfuscation policy fails."""

    component = "policy"

    def __init__(self, message: str, policy_file: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if policy_file:
            self.add_context("policy_file", policy_file)


class PolicyValidationError(PolicyError):
    """Raised when a policy file is not valid YAML or fails schema validation."""


class PolicyInheritanceError(PolicyError):
    """Raised when policy inheritance cannot be resolved."""


class ConfigurationError(SchemaCloakError):
    """Raised when observability configuration is invalid or unreadable."""

    component = "configuration"

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        config_section: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if config_file:
            self.add_context("config_file", config_file)
        if config_section:
            self.add_context("config_section", config_section)
