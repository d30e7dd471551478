"""Flask CLI command creating the schema for local development."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from gatekeeper.core.extensions import db


def _ensure_non_production() -> None:
    """Abort when running with the production configuration."""
    if not current_app.config.get("DEBUG") and not current_app.config.get("TESTING"):
        raise click.UsageError(
            "'flask schema create' is restricted to development and testing; "
            "use migrations in production."
        )


@click.group("schema")
def schema_cli() -> None:
    """Schema helpers for local development."""


@schema_cli.command("create")
@with_appcontext
def create_command() -> None:
    """Create any missing tables from the model metadata."""
    _ensure_non_production()
    db.create_all()
    click.echo("Schema created")
