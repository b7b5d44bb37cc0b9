"""Policy loading from YAML files with inheritance support."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import PolicyError, PolicyInheritanceError, PolicyValidationError
from .policies import ObfuscationPolicy
from .rules import DEFAULT_RULES, SensitivityRule, coerce_rule
from .strategies import DEFAULT_PLACEHOLDER, ReplaceKind, ReplaceStrategy

logger = logging.getLogger(__name__)

_VALUE_HINT = "Check the placeholder and the replace parameters for the chosen kind"


def _suggest(error: PolicyError, *suggestions: str) -> PolicyError:
    for suggestion in suggestions:
        error.add_recovery_suggestion(suggestion)
    return error


def _keys_hint() -> str:
    return f"Supported policy keys: {', '.join(PolicyFileSchema.model_fields)}"


@dataclass
class PolicyLoadContext:
    """Context for loading policies, tracks inheritance chain."""

    current_file: Path
    base_path: Path
    inheritance_chain: list[Path]

    def derive_path(self, relative_path: str) -> Path:
        """Resolve relative path from current policy file location."""
        if Path(relative_path).is_absolute():
            return Path(relative_path)
        return (self.current_file.parent / relative_path).resolve()


class ReplaceConfig(BaseModel):
    """Pydantic model for replacement strategy configuration."""

    kind: str = Field(..., description="Replacement strategy type")
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="Strategy parameters"
    )

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: Any) -> Any:
        """Validate strategy kind is supported and declarative."""
        try:
            kind = ReplaceKind(v)
        except ValueError as e:
            valid_kinds = [k.value for k in ReplaceKind if k != ReplaceKind.CUSTOM]
            raise ValueError(
                f"Invalid replacement kind '{v}'. Valid kinds: {valid_kinds}"
            ) from e
        if kind == ReplaceKind.CUSTOM:
            raise ValueError("Custom replacements cannot be declared in a policy file")
        return v


class PolicyFileSchema(BaseModel):
    """Pydantic model for policy file schema validation."""

    version: Optional[str] = Field("1.0", description="Policy schema version")
    name: Optional[str] = Field(None, description="Policy name")
    description: Optional[str] = Field(None, description="Policy description")
    extends: Optional[Union[str, list[str]]] = Field(
        None, description="Base policy files to inherit from"
    )

    placeholder: Optional[str] = Field(None, description="Obfuscation placeholder")
    include_defaults: Optional[bool] = Field(
        None, description="Prepend the default password rules"
    )
    rules: Optional[list[Union[str, dict[str, Any]]]] = Field(
        None, description="Ordered sensitivity rules"
    )
    replace: Optional[ReplaceConfig] = Field(
        None, description="Replacement strategy; defaults to the placeholder"
    )

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: Any) -> Any:
        """Validate version format."""
        if v is not None:
            parts = v.split(".")
            if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
                raise ValueError(
                    f"Version must follow format 'x.y' or 'x.y.z', got '{v}'"
                )
        return v


class PolicyLoader:
    """
    Policy loader with inheritance and validation support.

    Policy files are YAML documents such as::

        name: api-responses
        extends: base.yaml
        placeholder: "[hidden]"
        rules:
          - password
          - {type: string, format: password}
          - {x-sensitive: true}
        replace:
          kind: partial
          parameters: {visible_chars: 2}
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize policy loader.

        Args:
            base_path: Base directory for resolving relative policy paths
        """
        self.base_path = base_path or Path.cwd()
        self._policy_cache: dict[Path, PolicyFileSchema] = {}

    def load_policy(self, policy_path: Union[str, Path]) -> ObfuscationPolicy:
        """
        Load an obfuscation policy from file with full inheritance support.

        Args:
            policy_path: Path to policy YAML file

        Returns:
            Fully resolved ObfuscationPolicy instance

        Raises:
            PolicyValidationError: If policy validation fails
            PolicyInheritanceError: If inheritance cannot be resolved
            FileNotFoundError: If policy file doesn't exist
        """
        policy_path = Path(policy_path)
        if not policy_path.is_absolute():
            policy_path = self.base_path / policy_path

        context = PolicyLoadContext(
            current_file=policy_path, base_path=self.base_path, inheritance_chain=[]
        )

        policy_schema = self._load_policy_file(policy_path, context)
        try:
            policy = self._schema_to_policy(policy_schema)
        except ValueError as e:
            raise _suggest(
                PolicyValidationError(f"Invalid policy {policy_path}: {e}", policy_file=str(policy_path)),
                _VALUE_HINT,
            ) from e

        logger.debug(f"Loaded policy {policy_schema.name or policy_path} with {len(policy.rules)} rules")
        return policy

    def load_policy_from_dict(self, data: dict[str, Any]) -> ObfuscationPolicy:
        """
        Validate an in-memory policy mapping and convert it to a policy.

        ``extends`` entries are resolved relative to ``base_path``.
        """
        context = PolicyLoadContext(
            current_file=self.base_path / "<dict>",
            base_path=self.base_path,
            inheritance_chain=[],
        )
        try:
            policy_schema = PolicyFileSchema(**data)
        except ValidationError as e:
            raise _suggest(PolicyValidationError(f"Schema validation failed: {e}"), _keys_hint()) from e

        policy_schema = self._resolve_inheritance(policy_schema, context)
        try:
            return self._schema_to_policy(policy_schema)
        except ValueError as e:
            raise _suggest(PolicyValidationError(f"Invalid policy: {e}"), _VALUE_HINT) from e

    def _load_policy_file(
        self, policy_path: Path, context: PolicyLoadContext
    ) -> PolicyFileSchema:
        """
        Load and resolve a single policy file with inheritance applied.

        Raises:
            PolicyInheritanceError: If circular inheritance is detected
            PolicyValidationError: If YAML parsing or schema validation fails
            FileNotFoundError: If policy file or inherited files don't exist
        """
        resolved_policy_path = policy_path.resolve()
        resolved_chain = [p.resolve() for p in context.inheritance_chain]

        if resolved_policy_path in resolved_chain:
            chain_str = " -> ".join(
                str(p) for p in context.inheritance_chain + [policy_path]
            )
            raise _suggest(
                PolicyInheritanceError(
                    f"Circular inheritance detected: {chain_str}", policy_file=str(policy_path)
                ),
                f"Remove the extends entry that leads back to {policy_path.name}",
            )

        if resolved_policy_path in self._policy_cache:
            return self._policy_cache[resolved_policy_path]

        if not policy_path.exists():
            raise FileNotFoundError(f"Policy file not found: {policy_path}")

        try:
            with open(policy_path, encoding="utf-8") as f:
                policy_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise _suggest(
                PolicyValidationError(f"Invalid YAML in {policy_path}: {e}", policy_file=str(policy_path)),
                "Check the YAML syntax of the policy file",
            ) from e

        if not isinstance(policy_data, dict):
            raise _suggest(
                PolicyValidationError(
                    f"Policy file {policy_path} must contain a mapping",
                    policy_file=str(policy_path),
                ),
                _keys_hint(),
            )

        try:
            policy_schema = PolicyFileSchema(**policy_data)
        except ValidationError as e:
            raise _suggest(
                PolicyValidationError(
                    f"Schema validation failed for {policy_path}: {e}",
                    policy_file=str(policy_path),
                ),
                _keys_hint(),
            ) from e

        file_context = PolicyLoadContext(
            current_file=policy_path,
            base_path=context.base_path,
            inheritance_chain=context.inheritance_chain,
        )
        policy_schema = self._resolve_inheritance(policy_schema, file_context)

        self._policy_cache[resolved_policy_path] = policy_schema
        return policy_schema

    def _resolve_inheritance(
        self, policy_schema: PolicyFileSchema, context: PolicyLoadContext
    ) -> PolicyFileSchema:
        """Load every base policy named by ``extends`` and merge them base-first."""
        if not policy_schema.extends:
            return policy_schema

        new_context = PolicyLoadContext(
            current_file=context.current_file,
            base_path=context.base_path,
            inheritance_chain=context.inheritance_chain + [context.current_file],
        )

        extends_list = (
            policy_schema.extends
            if isinstance(policy_schema.extends, list)
            else [policy_schema.extends]
        )

        base_policies = []
        for base_path_str in extends_list:
            base_path = new_context.derive_path(base_path_str)
            base_policies.append(self._load_policy_file(base_path, new_context))

        return self._merge_policies(base_policies + [policy_schema])

    def _merge_policies(self, policies: list[PolicyFileSchema]) -> PolicyFileSchema:
        """
        Merge policy schemas in inheritance order (base first, child last).

        Scalar settings set by a later policy override earlier ones; rules
        are concatenated with duplicates dropped.
        """
        if not policies:
            raise ValueError("Cannot merge empty policy list")

        result = policies[0].model_copy(deep=True)
        for policy in policies[1:]:
            result = self._merge_two_policies(result, policy)
        return result

    def _merge_two_policies(
        self, base: PolicyFileSchema, override: PolicyFileSchema
    ) -> PolicyFileSchema:
        merged = base.model_copy(deep=True)

        for field_name in ("version", "name", "description", "placeholder", "include_defaults"):
            if field_name in override.model_fields_set:
                setattr(merged, field_name, getattr(override, field_name))

        if override.replace is not None:
            merged.replace = override.replace.model_copy(deep=True)

        if override.rules is not None:
            rules = list(merged.rules or [])
            seen = [coerce_rule(rule) for rule in rules]
            for rule in override.rules:
                coerced = coerce_rule(rule)
                if coerced not in seen:
                    seen.append(coerced)
                    rules.append(rule)
            merged.rules = rules

        merged.extends = None
        return merged

    def _schema_to_policy(self, policy_schema: PolicyFileSchema) -> ObfuscationPolicy:
        """Convert a resolved schema into an ObfuscationPolicy."""
        rules: list[SensitivityRule] = []
        if policy_schema.include_defaults or policy_schema.rules is None:
            rules.extend(DEFAULT_RULES)

        for rule_config in policy_schema.rules or []:
            rule = coerce_rule(rule_config)
            if rule not in rules:
                rules.append(rule)

        replace = None
        if policy_schema.replace is not None:
            replace = ReplaceStrategy(
                kind=ReplaceKind(policy_schema.replace.kind),
                parameters=dict(policy_schema.replace.parameters),
            )

        return ObfuscationPolicy(
            placeholder=(
                DEFAULT_PLACEHOLDER if policy_schema.placeholder is None else policy_schema.placeholder
            ),
            rules=tuple(rules),
            replace=replace,
        )
