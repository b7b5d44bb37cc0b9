"""Replacement strategies for values under sensitive schema nodes."""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

DEFAULT_PLACEHOLDER = "**********"

ReplaceFunc = Callable[[Any], Any]


class ReplaceKind(Enum):
    """Types of replacement strategies available."""

    PLACEHOLDER = "placeholder"
    REDACT = "redact"
    PARTIAL = "partial"
    HASH = "hash"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ReplaceStrategy:
    """
    A replacement strategy that defines how to transform a sensitive value.

    Strategies are callable, so they can be passed anywhere a replace
    function is accepted.

    Attributes:
        kind: The type of replacement to apply
        parameters: Strategy-specific parameters for configuration

    Examples:
        >>> ReplaceStrategy(ReplaceKind.PLACEHOLDER)("hunter2")
        '**********'

        >>> ReplaceStrategy(ReplaceKind.PARTIAL, {"visible_chars": 4})("4111111111111111")
        '************1111'

        >>> ReplaceStrategy(ReplaceKind.REDACT, {"preserve_length": True})("secret")
        '******'
    """

    kind: ReplaceKind
    parameters: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        """Validate strategy parameters after initialization."""
        if self.parameters is None:
            object.__setattr__(self, "parameters", {})

        self._validate_parameters()

    def _validate_parameters(self) -> None:
        """Validate parameters for the specific strategy kind."""
        params = self.parameters or {}

        if self.kind == ReplaceKind.PLACEHOLDER:
            self._validate_placeholder_params(params)
        elif self.kind == ReplaceKind.REDACT:
            self._validate_redact_params(params)
        elif self.kind == ReplaceKind.PARTIAL:
            self._validate_partial_params(params)
        elif self.kind == ReplaceKind.HASH:
            self._validate_hash_params(params)
        elif self.kind == ReplaceKind.CUSTOM:
            self._validate_custom_params(params)

    def _validate_placeholder_params(self, params: Dict[str, Any]) -> None:
        """Validate parameters for placeholder strategy."""
        if "placeholder" in params and not isinstance(params["placeholder"], str):
            raise ValueError("placeholder must be a string")

    def _validate_redact_params(self, params: Dict[str, Any]) -> None:
        """Validate parameters for redact strategy."""
        if "redact_char" in params:
            if not isinstance(params["redact_char"], str) or len(params["redact_char"]) != 1:
                raise ValueError("redact_char must be a single character string")

        if "preserve_length" in params and not isinstance(params["preserve_length"], bool):
            raise ValueError("preserve_length must be a boolean")

        if "length" in params:
            length = params["length"]
            if not isinstance(length, int) or isinstance(length, bool) or length < 0:
                raise ValueError("length must be a non-negative integer")

    def _validate_partial_params(self, params: Dict[str, Any]) -> None:
        """Validate parameters for partial masking strategy."""
        if "visible_chars" not in params:
            raise ValueError("Partial strategy requires 'visible_chars' parameter")

        visible_chars = params["visible_chars"]
        if not isinstance(visible_chars, int) or isinstance(visible_chars, bool) or visible_chars < 0:
            raise ValueError("visible_chars must be a non-negative integer")

        position = params.get("position", "end")
        if position not in {"start", "end"}:
            raise ValueError("Position must be 'start' or 'end'")

        mask_char = params.get("mask_char", "*")
        if not isinstance(mask_char, str) or len(mask_char) != 1:
            raise ValueError("mask_char must be a single character string")

    def _validate_hash_params(self, params: Dict[str, Any]) -> None:
        """Validate parameters for hash strategy."""
        valid_algorithms = {"md5", "sha1", "sha256", "sha384", "sha512"}

        algorithm = params.get("algorithm", "sha256")
        if algorithm not in valid_algorithms:
            raise ValueError(f"Hash algorithm must be one of: {valid_algorithms}")

        if "salt" in params and not isinstance(params["salt"], str):
            raise ValueError("Salt must be a string")

        if "truncate" in params:
            truncate = params["truncate"]
            if not isinstance(truncate, int) or isinstance(truncate, bool) or truncate < 1:
                raise ValueError("Truncate must be a positive integer")

        if "prefix" in params and not isinstance(params["prefix"], str):
            raise ValueError("Prefix must be a string")

    def _validate_custom_params(self, params: Dict[str, Any]) -> None:
        """Validate parameters for custom strategy."""
        if "callback" not in params:
            raise ValueError("Custom strategy requires 'callback' parameter")

        if not callable(params["callback"]):
            raise ValueError("Callback must be a callable function")

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """Get a parameter value with optional default."""
        return (self.parameters or {}).get(key, default)

    def with_parameters(self, **new_params: Any) -> "ReplaceStrategy":
        """Create a new ReplaceStrategy with updated parameters."""
        merged_params = {**(self.parameters or {}), **new_params}
        return ReplaceStrategy(kind=self.kind, parameters=merged_params)

    def __call__(self, value: Any) -> Any:
        """Apply the strategy to a sensitive value and return its replacement."""
        if self.kind == ReplaceKind.PLACEHOLDER:
            return self.get_parameter("placeholder", DEFAULT_PLACEHOLDER)
        elif self.kind == ReplaceKind.REDACT:
            return self._apply_redact(value)
        elif self.kind == ReplaceKind.PARTIAL:
            return self._apply_partial(value)
        elif self.kind == ReplaceKind.HASH:
            return self._apply_hash(value)
        return self.get_parameter("callback")(value)

    def _apply_redact(self, value: Any) -> str:
        redact_char = self.get_parameter("redact_char", "*")
        if self.get_parameter("preserve_length", False):
            return redact_char * len(_as_text(value))
        return redact_char * self.get_parameter("length", len(DEFAULT_PLACEHOLDER))

    def _apply_partial(self, value: Any) -> str:
        text = _as_text(value)
        mask_char = self.get_parameter("mask_char", "*")
        visible_chars = min(self.get_parameter("visible_chars"), len(text))
        masked = mask_char * (len(text) - visible_chars)

        if self.get_parameter("position", "end") == "start":
            return text[:visible_chars] + masked
        return masked + text[len(text) - visible_chars:]

    def _apply_hash(self, value: Any) -> str:
        algorithm = self.get_parameter("algorithm", "sha256")
        salt = self.get_parameter("salt", "")
        digest = hashlib.new(algorithm, (salt + _as_text(value)).encode("utf-8")).hexdigest()

        truncate = self.get_parameter("truncate")
        if truncate:
            digest = digest[:truncate]

        return self.get_parameter("prefix", "") + digest


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def wrap_replace(replace: Any) -> ReplaceFunc:
    """
    Normalize a replace value into a callable.

    Args:
        replace: A constant replacement value or a callable taking the
            original value (ReplaceStrategy instances are callables)

    Returns:
        Callable mapping the original value to its replacement
    """
    if callable(replace):
        return replace
    return lambda value: replace


# Predefined common strategies for convenience
DEFAULT_PLACEHOLDER_STRATEGY = ReplaceStrategy(ReplaceKind.PLACEHOLDER)
DEFAULT_REDACT = ReplaceStrategy(ReplaceKind.REDACT, {"preserve_length": True})
LAST_FOUR = ReplaceStrategy(ReplaceKind.PARTIAL, {"visible_chars": 4, "position": "end"})
HASH_SHA256 = ReplaceStrategy(ReplaceKind.HASH, {"algorithm": "sha256", "truncate": 8})
