#!/usr/bin/env python3
"""SchemaCloak CLI - obfuscate and reconcile JSON/YAML documents."""

import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from schemacloak import __version__
from schemacloak.core.exceptions import SchemaCloakError
from schemacloak.core.policies import ObfuscationPolicy
from schemacloak.core.policy_loader import PolicyLoader
from schemacloak.defaults import get_default_policy
from schemacloak.engine import SchemaCloakEngine
from schemacloak.observability.config import LoggingConfig
from schemacloak.observability.logging import configure_logging


def _load_document(path: Path) -> Any:
    """Load a JSON or YAML document."""
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Could not parse {path}: {e}") from e


def _write_document(data: Any, output: Path | None) -> None:
    """Write a document as JSON to ``output`` or stdout."""
    text = json.dumps(data, indent=2, default=str)
    if output is None:
        click.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Saved document to: {output}", err=True)


def _resolve_policy(policy: str | None, placeholder: str | None) -> ObfuscationPolicy:
    """Load the policy file if given and apply a placeholder override."""
    try:
        resolved = PolicyLoader().load_policy(Path(policy)) if policy else get_default_policy()
        if placeholder is not None:
            resolved = resolved.with_placeholder(placeholder)
    except SchemaCloakError as e:
        hints = "".join(f"\n  Hint: {suggestion}" for suggestion in e.recovery_suggestions)
        raise click.ClickException(f"{e}{hints}") from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    return resolved


@click.group()
@click.version_option(version=__version__, prog_name="schemacloak")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SchemaCloak: schema-driven obfuscation of sensitive fields."""
    ctx.ensure_object(dict)
    if verbose:
        configure_logging(LoggingConfig(level="DEBUG", format="text", output="stderr"))


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.option("--policy", "-p", type=click.Path(exists=True, dir_okay=False), help="Path to policy YAML file")
@click.option("--placeholder", type=str, default=None, help="Override the policy placeholder")
def obfuscate(
    schema_file: str,
    input_file: str,
    output: str | None,
    policy: str | None,
    placeholder: str | None,
) -> None:
    """Obfuscate sensitive fields of INPUT_FILE described by SCHEMA_FILE."""
    engine = SchemaCloakEngine(policy=_resolve_policy(policy, placeholder))

    schema = _load_document(Path(schema_file))
    document = _load_document(Path(input_file))

    _write_document(engine.obfuscate(document, schema), Path(output) if output else None)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("previous_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.option("--policy", "-p", type=click.Path(exists=True, dir_okay=False), help="Path to policy YAML file")
@click.option("--placeholder", type=str, default=None, help="Override the policy placeholder")
def unobfuscate(
    input_file: str,
    previous_file: str,
    output: str | None,
    policy: str | None,
    placeholder: str | None,
) -> None:
    """Restore values of PREVIOUS_FILE wherever INPUT_FILE holds the placeholder."""
    engine = SchemaCloakEngine(policy=_resolve_policy(policy, placeholder))

    document = _load_document(Path(input_file))
    previous = _load_document(Path(previous_file))

    _write_document(engine.unobfuscate(document, previous), Path(output) if output else None)


@cli.command()
@click.option("--policy", "-p", type=click.Path(exists=True, dir_okay=False), help="Path to policy YAML file")
def rules(policy: str | None) -> None:
    """Show the effective placeholder and sensitivity rules."""
    resolved = _resolve_policy(policy, None)

    click.echo(f"Placeholder: {resolved.placeholder}")
    if not resolved.rules:
        click.echo("No rules: nothing will be obfuscated")
        return
    for index, rule in enumerate(resolved.rules, start=1):
        click.echo(f"{index}. {rule.kind.value}: {json.dumps(rule.to_config(), default=str)}")


def main() -> int:
    """Main entry point."""
    try:
        cli()
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
