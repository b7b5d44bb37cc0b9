"""Shared fixtures for SchemaCloak tests."""

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from schemacloak import SchemaCloakEngine
from schemacloak.observability.config import set_config


@pytest.fixture(autouse=True)
def reset_observability() -> Generator[None, None, None]:
    """Restore global logging state changed by configure_logging."""
    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    structlog.reset_defaults()
    set_config(None)
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def user_schema() -> dict[str, Any]:
    """Schema of a user record with a password and nested credentials."""
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "password": {"type": "password"},
            "settings": {
                "type": "object",
                "properties": {
                    "theme": {"type": "string"},
                    "api_key": {"type": "string", "format": "password"},
                },
            },
            "tokens": {
                "type": "array",
                "items": {"type": "string", "format": "password"},
            },
        },
    }


@pytest.fixture
def user_value() -> dict[str, Any]:
    """User record matching ``user_schema``."""
    return {
        "name": "ada",
        "password": "correct horse",
        "settings": {"theme": "dark", "api_key": "sk-123"},
        "tokens": ["t1", "t2"],
        "created": "2024-01-01",
    }


@pytest.fixture
def basic_engine() -> SchemaCloakEngine:
    """Create a SchemaCloakEngine with default settings."""
    return SchemaCloakEngine()


@pytest.fixture
def policy_dir(tmp_path: Path) -> Path:
    """Directory for policy files written by tests."""
    directory = tmp_path / "policies"
    directory.mkdir()
    return directory
