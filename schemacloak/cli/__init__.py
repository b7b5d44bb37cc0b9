"""Command line interface for SchemaCloak."""

from .main import cli, main

__all__ = ["cli", "main"]
