"""Keygate command-line interface."""

from keygate_identity.presentation.cli.app import app, cli

__all__ = ["app", "cli"]
