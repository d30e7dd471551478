"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .schema import schema_cli
from .tokens import tokens_cli
from .users import users_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry receives the
        ``users``, ``tokens`` and ``schema`` groups.
    """
    app.cli.add_command(users_cli)
    app.cli.add_command(tokens_cli)
    app.cli.add_command(schema_cli)
