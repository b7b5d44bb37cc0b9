"""Tests for the SchemaCloak command line interface."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from schemacloak import DEFAULT_PLACEHOLDER, __version__
from schemacloak.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def documents(tmp_path: Path, user_schema, user_value) -> dict[str, Path]:
    """Write the user schema as YAML and the user value as JSON."""
    schema_file = tmp_path / "schema.yaml"
    schema_file.write_text(yaml.safe_dump(user_schema), encoding="utf-8")
    input_file = tmp_path / "user.json"
    input_file.write_text(json.dumps(user_value), encoding="utf-8")
    return {"schema": schema_file, "input": input_file}


class TestCLIBasics:
    """Test top-level CLI behaviour."""

    def test_help(self, runner: CliRunner):
        """Test the help lists every command."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("obfuscate", "unobfuscate", "rules"):
            assert command in result.output

    def test_version(self, runner: CliRunner):
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"schemacloak, version {__version__}" in result.output


class TestObfuscateCommand:
    """Test the obfuscate command."""

    def test_obfuscate_to_stdout(self, runner, documents):
        """Test obfuscated JSON is written to stdout."""
        result = runner.invoke(cli, ["obfuscate", str(documents["schema"]), str(documents["input"])])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["password"] == DEFAULT_PLACEHOLDER
        assert data["settings"]["api_key"] == DEFAULT_PLACEHOLDER
        assert data["name"] == "ada"

    def test_obfuscate_to_file(self, runner, documents, tmp_path: Path):
        """Test the output option writes a file."""
        output = tmp_path / "out.json"

        result = runner.invoke(
            cli,
            ["obfuscate", str(documents["schema"]), str(documents["input"]), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert "Saved document to" in result.output
        assert json.loads(output.read_text(encoding="utf-8"))["password"] == DEFAULT_PLACEHOLDER

    def test_obfuscate_with_placeholder(self, runner, documents):
        """Test the placeholder override."""
        result = runner.invoke(
            cli,
            ["obfuscate", str(documents["schema"]), str(documents["input"]), "--placeholder", "[x]"],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["password"] == "[x]"

    def test_obfuscate_with_policy(self, runner, documents, policy_dir: Path):
        """Test a policy file changes the rules."""
        policy = policy_dir / "names.yaml"
        policy.write_text("rules: [{type: string}]\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["obfuscate", str(documents["schema"]), str(documents["input"]), "-p", str(policy)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["name"] == DEFAULT_PLACEHOLDER
        assert data["password"] == "correct horse"

    def test_obfuscate_invalid_policy(self, runner, documents, policy_dir: Path):
        """Test an invalid policy file fails with an error message."""
        policy = policy_dir / "bad.yaml"
        policy.write_text("replace: {kind: shred}\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["obfuscate", str(documents["schema"]), str(documents["input"]), "-p", str(policy)],
        )

        assert result.exit_code == 1
        assert "Schema validation failed" in result.output
        assert "Hint: Supported policy keys" in result.output

    def test_obfuscate_unparseable_input(self, runner, documents, tmp_path: Path):
        """Test malformed input documents are reported."""
        broken = tmp_path / "broken.json"
        broken.write_text("{unclosed: [", encoding="utf-8")

        result = runner.invoke(cli, ["obfuscate", str(documents["schema"]), str(broken)])

        assert result.exit_code == 1
        assert "Could not parse" in result.output

    def test_obfuscate_missing_file(self, runner, documents):
        """Test a missing input file is a usage error."""
        result = runner.invoke(cli, ["obfuscate", str(documents["schema"]), "missing.json"])
        assert result.exit_code == 2

    def test_verbose(self, runner, documents):
        """Test verbose mode still obfuscates."""
        result = runner.invoke(
            cli, ["--verbose", "obfuscate", str(documents["schema"]), str(documents["input"])]
        )

        assert result.exit_code == 0, result.output
        assert DEFAULT_PLACEHOLDER in result.output


class TestUnobfuscateCommand:
    """Test the unobfuscate command."""

    def test_round_trip(self, runner, documents, tmp_path: Path, user_value):
        """Test obfuscating then unobfuscating restores the document."""
        obfuscated = tmp_path / "obfuscated.json"
        result = runner.invoke(
            cli,
            ["obfuscate", str(documents["schema"]), str(documents["input"]), "-o", str(obfuscated)],
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["unobfuscate", str(obfuscated), str(documents["input"])])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == user_value

    def test_custom_placeholder(self, runner, tmp_path: Path):
        """Test only the given placeholder is restored."""
        edited = tmp_path / "edited.json"
        edited.write_text(json.dumps({"a": "[x]", "b": DEFAULT_PLACEHOLDER}), encoding="utf-8")
        previous = tmp_path / "previous.json"
        previous.write_text(json.dumps({"a": 1, "b": 2}), encoding="utf-8")

        result = runner.invoke(
            cli, ["unobfuscate", str(edited), str(previous), "--placeholder", "[x]"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"a": 1, "b": DEFAULT_PLACEHOLDER}


class TestRulesCommand:
    """Test the rules command."""

    def test_default_rules(self, runner: CliRunner):
        """Test the default placeholder and rules are listed."""
        result = runner.invoke(cli, ["rules"])

        assert result.exit_code == 0, result.output
        assert f"Placeholder: {DEFAULT_PLACEHOLDER}" in result.output
        assert '1. by_type: "password"' in result.output
        assert '2. by_attributes: {"type": "string", "format": "password"}' in result.output

    def test_empty_rules(self, runner: CliRunner, policy_dir: Path):
        """Test a policy without rules says nothing is obfuscated."""
        policy = policy_dir / "none.yaml"
        policy.write_text("rules: []\n", encoding="utf-8")

        result = runner.invoke(cli, ["rules", "-p", str(policy)])

        assert result.exit_code == 0, result.output
        assert "No rules: nothing will be obfuscated" in result.output
