"""Policy bundling placeholder, sensitivity rules and replacement behaviour."""

from dataclasses import dataclass, field
from typing import Any, Optional

from .rules import DEFAULT_RULES, RuleLike, SensitivityRule, coerce_rules
from .strategies import DEFAULT_PLACEHOLDER, ReplaceFunc, ReplaceKind, ReplaceStrategy, wrap_replace


@dataclass(frozen=True)
class ObfuscationPolicy:
    """
    Configuration for which schema nodes are sensitive and how they are masked.

    Attributes:
        placeholder: Marker substituted for sensitive values and recognised
            again when reconciling
        rules: Ordered sensitivity rules; any match marks a node sensitive
        replace: Optional constant or callable replacement; None means the
            placeholder is substituted

    Examples:
        >>> # Mask schema nodes flagged with a custom marker as well
        >>> policy = ObfuscationPolicy().with_rules({"isSensitive": True})

        >>> # Keep the last four characters of card numbers
        >>> policy = ObfuscationPolicy(
        ...     rules=[{"type": "string", "format": "credit-card"}],
        ...     replace=LAST_FOUR,
        ... )
    """

    placeholder: str = field(default=DEFAULT_PLACEHOLDER)
    rules: tuple[SensitivityRule, ...] = field(default=DEFAULT_RULES)
    replace: Optional[Any] = field(default=None)

    def __post_init__(self) -> None:
        """Validate policy configuration after initialization."""
        self._validate_placeholder()
        self._validate_rules()
        self._align_placeholder_strategy()

    def _validate_placeholder(self) -> None:
        if not isinstance(self.placeholder, str):
            raise ValueError("Placeholder must be a string")

    def _validate_rules(self) -> None:
        """Coerce rule-like values into an immutable tuple of rules."""
        if self.rules is None:
            raise ValueError("Rules must be a sequence, use an empty list to match nothing")
        object.__setattr__(self, "rules", coerce_rules(self.rules))

    def _align_placeholder_strategy(self) -> None:
        """Keep a PLACEHOLDER replace strategy and the policy placeholder identical."""
        if not isinstance(self.replace, ReplaceStrategy) or self.replace.kind != ReplaceKind.PLACEHOLDER:
            return

        marker = self.replace.get_parameter("placeholder")
        if marker is None:
            object.__setattr__(
                self, "replace", self.replace.with_parameters(placeholder=self.placeholder)
            )
        elif self.placeholder == DEFAULT_PLACEHOLDER:
            object.__setattr__(self, "placeholder", marker)
        elif marker != self.placeholder:
            raise ValueError(
                f"Placeholder strategy writes '{marker}' but the policy placeholder is "
                f"'{self.placeholder}'"
            )

    def replace_func(self) -> ReplaceFunc:
        """Return the normalized replacement callable for this policy."""
        if self.replace is None:
            return wrap_replace(self.placeholder)
        return wrap_replace(self.replace)

    def with_rules(self, *extra_rules: RuleLike) -> "ObfuscationPolicy":
        """Create a new policy with ``extra_rules`` appended to the current rules."""
        rules = list(self.rules)
        for rule in coerce_rules(extra_rules):
            if rule not in rules:
                rules.append(rule)
        return ObfuscationPolicy(
            placeholder=self.placeholder, rules=tuple(rules), replace=self.replace
        )

    def with_placeholder(self, placeholder: str) -> "ObfuscationPolicy":
        """Create a new policy using a different placeholder.

        A PLACEHOLDER replace strategy is rebuilt to write the new placeholder.
        """
        replace = self.replace
        if isinstance(replace, ReplaceStrategy) and replace.kind == ReplaceKind.PLACEHOLDER:
            replace = replace.with_parameters(placeholder=placeholder)
        return ObfuscationPolicy(placeholder=placeholder, rules=self.rules, replace=replace)

    def to_dict(self) -> dict[str, Any]:
        """Convert the policy's declarative parts to a plain dictionary."""
        return {
            "placeholder": self.placeholder,
            "rules": [rule.to_config() for rule in self.rules],
        }


DEFAULT_POLICY = ObfuscationPolicy()
